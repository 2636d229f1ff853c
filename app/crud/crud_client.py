from sqlalchemy.orm import Session
from typing import Optional, List

from app.models.client import Client, ClientProduct
from app.schemas.client import ClientCreateInternal, ClientProductCreateInternal

def get_client(db: Session, client_id: int) -> Optional[Client]:
    return db.query(Client).filter(Client.id == client_id).first()

def get_clients(db: Session, *, reseller_id: Optional[int] = None, skip: int = 0, limit: int = 100) -> List[Client]:
    """
    Clients of one reseller, or every client when reseller_id is None (admin view).
    """
    query = db.query(Client)
    if reseller_id is not None:
        query = query.filter(Client.reseller_id == reseller_id)
    return query.order_by(Client.name).offset(skip).limit(limit).all()

def create_client(db: Session, *, obj_in: ClientCreateInternal) -> Client:
    db_obj = Client(**obj_in.model_dump())
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def create_client_product(db: Session, *, obj_in: ClientProductCreateInternal, commit: bool = True) -> ClientProduct:
    """
    With commit=False the row is only flushed; the caller owns the transaction.
    """
    db_obj = ClientProduct(**obj_in.model_dump())
    db.add(db_obj)
    if commit:
        db.commit()
        db.refresh(db_obj)
    else:
        db.flush()
    return db_obj

def get_client_products(db: Session, *, client_id: int) -> List[ClientProduct]:
    return (
        db.query(ClientProduct)
        .filter(ClientProduct.client_id == client_id)
        .order_by(ClientProduct.id)
        .all()
    )
