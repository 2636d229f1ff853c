from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from app.crud import crud_client, crud_user
from app.core import billing
from app.core.dependencies import get_current_active_user
from app.db.session import get_db
from app.models.user import User as UserModel
from app.schemas.client import Client, ClientCreate, ClientCreateInternal, ClientProduct, ClientProductPurchase

router = APIRouter()

@router.get("/", response_model=List[Client])
def read_clients(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    """
    Resellers see their own clients; admins see every client.
    """
    reseller_id = None if current_user.is_admin else current_user.id
    return crud_client.get_clients(db, reseller_id=reseller_id, skip=skip, limit=limit)

@router.post("/", response_model=Client, status_code=201)
def create_client(
    client_in: ClientCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user)
):
    # Resellers always own the clients they create
    reseller_id = current_user.id
    if current_user.is_admin and client_in.reseller_id is not None:
        if not crud_user.get_user(db, user_id=client_in.reseller_id):
            raise HTTPException(status_code=404, detail=f"Reseller with id {client_in.reseller_id} not found.")
        reseller_id = client_in.reseller_id

    client_internal = ClientCreateInternal(
        **client_in.model_dump(exclude={"reseller_id"}),
        reseller_id=reseller_id,
    )
    return crud_client.create_client(db=db, obj_in=client_internal)

@router.get("/{client_id}", response_model=Client)
def read_client(
    client_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user)
):
    db_client = crud_client.get_client(db, client_id)
    if not db_client:
        raise HTTPException(status_code=404, detail="Client not found")
    if not current_user.is_admin and db_client.reseller_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not authorized to view this client")
    return db_client

@router.get("/{client_id}/products", response_model=List[ClientProduct])
def read_client_products(
    client_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user)
):
    db_client = read_client(client_id, db=db, current_user=current_user)
    return crud_client.get_client_products(db, client_id=db_client.id)

@router.post("/{client_id}/products", response_model=ClientProduct, status_code=201)
def purchase_client_product(
    client_id: int,
    purchase_in: ClientProductPurchase,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user)
):
    """
    Buy a product for a client. Resellers are charged the pro-rata price for their
    group today; a balance that does not cover it is refused with 400.
    """
    return billing.purchase_for_client(
        db, client_id=client_id, product_id=purchase_in.product_id, actor=current_user
    )
