from sqlalchemy.orm import Session, joinedload
from typing import Optional, List

from app.models.user_product import UserProduct, UserProductEndpoint
from app.schemas.user_product import (
    UserProductCreateInternal,
    UserProductUpdate,
    UserProductEndpointCreateInternal,
)

def create_user_product(db: Session, *, obj_in: UserProductCreateInternal, commit: bool = True) -> UserProduct:
    """
    Create a user product. With commit=False the row is flushed (so it has an id and
    constraint violations surface) but the transaction is left to the caller.
    """
    db_obj = UserProduct(**obj_in.model_dump())
    db.add(db_obj)
    if commit:
        db.commit()
        db.refresh(db_obj)
    else:
        db.flush()
    return db_obj

def get_user_product(db: Session, user_product_id: int) -> Optional[UserProduct]:
    """
    Get a user product with its product and endpoints (and each endpoint's API setting).
    """
    return (
        db.query(UserProduct)
        .options(
            joinedload(UserProduct.product),
            joinedload(UserProduct.endpoints).joinedload(UserProductEndpoint.api_setting)
        )
        .filter(UserProduct.id == user_product_id)
        .first()
    )

def get_user_products_by_user(db: Session, *, user_id: int, skip: int = 0, limit: int = 100) -> List[UserProduct]:
    return (
        db.query(UserProduct)
        .options(joinedload(UserProduct.product))
        .filter(UserProduct.user_id == user_id)
        .order_by(UserProduct.created_at.desc(), UserProduct.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

def get_user_products_by_order(db: Session, *, order_id: int) -> List[UserProduct]:
    return db.query(UserProduct).filter(UserProduct.source_order_id == order_id).all()

def update_user_product(db: Session, *, db_obj: UserProduct, obj_in: UserProductUpdate) -> UserProduct:
    for field, value in obj_in.model_dump(exclude_unset=True).items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def delete_user_product(db: Session, *, user_product_id: int) -> Optional[UserProduct]:
    """
    Delete a user product and, through the cascade, its endpoints.
    Returns the deleted object if found, otherwise None.
    """
    db_obj = db.query(UserProduct).filter(UserProduct.id == user_product_id).first()
    if db_obj:
        db.delete(db_obj)
        db.commit()
        return db_obj
    return None

def create_endpoint(db: Session, *, obj_in: UserProductEndpointCreateInternal) -> UserProductEndpoint:
    db_obj = UserProductEndpoint(**obj_in.model_dump())
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def get_endpoint(db: Session, endpoint_id: int) -> Optional[UserProductEndpoint]:
    return db.query(UserProductEndpoint).filter(UserProductEndpoint.id == endpoint_id).first()

def get_endpoints(db: Session, *, user_product_id: int) -> List[UserProductEndpoint]:
    return (
        db.query(UserProductEndpoint)
        .options(joinedload(UserProductEndpoint.api_setting))
        .filter(UserProductEndpoint.user_product_id == user_product_id)
        .order_by(UserProductEndpoint.id)
        .all()
    )

def delete_endpoint(db: Session, *, endpoint_id: int) -> Optional[UserProductEndpoint]:
    db_obj = get_endpoint(db, endpoint_id)
    if db_obj:
        db.delete(db_obj)
        db.commit()
        return db_obj
    return None
