import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from app.crud import crud_user_product, crud_user, crud_product, crud_api_setting
from app.core.dependencies import get_current_active_user, get_current_active_admin
from app.db.session import get_db
from app.models.user import User as UserModel
from app.schemas.user_product import (
    UserProduct,
    UserProductDetail,
    UserProductCreate,
    UserProductCreateInternal,
    UserProductUpdate,
    UserProductEndpoint,
    UserProductEndpointCreate,
    UserProductEndpointCreateInternal,
)

logger = logging.getLogger(__name__)
router = APIRouter()

def _get_owned_user_product(db: Session, user_product_id: int, current_user: UserModel):
    db_user_product = crud_user_product.get_user_product(db, user_product_id)
    if not db_user_product:
        raise HTTPException(status_code=404, detail="User product not found")
    if not current_user.is_admin and db_user_product.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not authorized to access this user product")
    return db_user_product

@router.get("/user/{user_id}", response_model=List[UserProduct])
def read_user_products_for_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    if not current_user.is_admin and user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not authorized to view these user products")
    return crud_user_product.get_user_products_by_user(db, user_id=user_id, skip=skip, limit=limit)

@router.get("/{user_product_id}", response_model=UserProductDetail)
def read_user_product(
    user_product_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user)
):
    """
    A provisioned product with its API endpoints.
    """
    return _get_owned_user_product(db, user_product_id, current_user)

@router.post("/", response_model=UserProduct, status_code=201, tags=["Admin User Products"])
def create_user_product(
    user_product_in: UserProductCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Admin: assign a product to a user directly, without an order.
    """
    if not crud_user.get_user(db, user_id=user_product_in.user_id):
        raise HTTPException(status_code=404, detail=f"User with id {user_product_in.user_id} not found.")
    if not crud_product.get_product(db, user_product_in.product_id):
        raise HTTPException(status_code=404, detail=f"Product with id {user_product_in.product_id} not found.")

    db_user_product = crud_user_product.create_user_product(
        db=db, obj_in=UserProductCreateInternal(**user_product_in.model_dump())
    )
    logger.info(
        f"User product ID: {db_user_product.id} assigned to user ID: {db_user_product.user_id} "
        f"by admin ID: {current_user.id}"
    )
    return crud_user_product.get_user_product(db, db_user_product.id)

@router.patch("/{user_product_id}", response_model=UserProduct, tags=["Admin User Products"])
def update_user_product(
    user_product_id: int,
    user_product_in: UserProductUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    db_user_product = crud_user_product.get_user_product(db, user_product_id)
    if not db_user_product:
        raise HTTPException(status_code=404, detail="User product not found")
    return crud_user_product.update_user_product(db=db, db_obj=db_user_product, obj_in=user_product_in)

@router.delete("/{user_product_id}", status_code=204, tags=["Admin User Products"])
def delete_user_product(
    user_product_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    deleted = crud_user_product.delete_user_product(db=db, user_product_id=user_product_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="User product not found")
    logger.info(f"User product ID: {user_product_id} deleted by admin ID: {current_user.id}")
    return None

@router.get("/{user_product_id}/endpoints", response_model=List[UserProductEndpoint])
def read_user_product_endpoints(
    user_product_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user)
):
    _get_owned_user_product(db, user_product_id, current_user)
    return crud_user_product.get_endpoints(db, user_product_id=user_product_id)

@router.post("/{user_product_id}/endpoints", response_model=UserProductEndpoint, status_code=201, tags=["Admin User Products"])
def create_user_product_endpoint(
    user_product_id: int,
    endpoint_in: UserProductEndpointCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    if not crud_user_product.get_user_product(db, user_product_id):
        raise HTTPException(status_code=404, detail="User product not found")
    if not crud_api_setting.get_api_setting(db, endpoint_in.api_setting_id):
        raise HTTPException(status_code=404, detail=f"API setting with id {endpoint_in.api_setting_id} not found.")

    endpoint_internal = UserProductEndpointCreateInternal(
        **endpoint_in.model_dump(),
        user_product_id=user_product_id,
    )
    return crud_user_product.create_endpoint(db=db, obj_in=endpoint_internal)

@router.delete("/endpoints/{endpoint_id}", status_code=204, tags=["Admin User Products"])
def delete_user_product_endpoint(
    endpoint_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    if not crud_user_product.delete_endpoint(db=db, endpoint_id=endpoint_id):
        raise HTTPException(status_code=404, detail="Endpoint not found")
    return None
