from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud import crud_order
from app.core import order_lifecycle
from app.schemas.order import (
    ProductOrder,
    ProductOrderCreate,
    ProductOrderUpdate,
    OrderRejection,
)
from app.models.user import User as UserModel
from app.db.session import get_db
from app.core.dependencies import get_current_active_user, get_current_active_admin

router = APIRouter()

STATUS_PATTERN = "^(pending|active|rejected)$"

@router.post("/", response_model=ProductOrder, status_code=201)
def submit_order(
    order_in: ProductOrderCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user)
):
    """
    Submit a product order for one of the caller's clients. The order starts out pending.
    Self provisioning needs a SIM number; courier delivery needs address and contact details.
    """
    return order_lifecycle.submit_order(db, order_in=order_in, actor=current_user)

@router.get("/", response_model=List[ProductOrder], tags=["Admin Orders"])
def admin_read_orders(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin),
    status: Optional[str] = Query(None, pattern=STATUS_PATTERN),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    """
    Admin: all orders, newest first, optionally filtered by status (e.g. the pending queue).
    """
    return crud_order.get_orders(db, status=status, skip=skip, limit=limit)

@router.get("/mine", response_model=List[ProductOrder])
def read_my_orders(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
    status: Optional[str] = Query(None, pattern=STATUS_PATTERN),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    return crud_order.get_orders_by_reseller(
        db, reseller_id=current_user.id, status=status, skip=skip, limit=limit
    )

@router.get("/{order_id}", response_model=ProductOrder)
def read_order_details(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user)
):
    """
    A reseller can only view their own orders. Admins can view any order.
    """
    db_order = crud_order.get_order(db, order_id=order_id)
    if not db_order:
        raise HTTPException(status_code=404, detail="Order not found")

    if not current_user.is_admin and db_order.reseller_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not authorized to view this order")

    return db_order

@router.post("/{order_id}/approve", response_model=ProductOrder, tags=["Admin Orders"])
def approve_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Admin: activate a pending order and provision its user product for the reseller.
    """
    return order_lifecycle.approve_order(db, order_id=order_id, actor=current_user)

@router.post("/{order_id}/reject", response_model=ProductOrder, tags=["Admin Orders"])
def reject_order(
    order_id: int,
    rejection: OrderRejection,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    return order_lifecycle.reject_order(db, order_id=order_id, actor=current_user, reason=rejection.reason)

@router.patch("/{order_id}", response_model=ProductOrder, tags=["Admin Orders"])
def update_order_status(
    order_id: int,
    decision: ProductOrderUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Admin: decide a pending order with {"status": "active"} or
    {"status": "rejected", "rejection_reason": "..."}.
    """
    return order_lifecycle.apply_admin_decision(db, order_id=order_id, actor=current_user, decision=decision)

@router.get("/admin/by-reseller/{reseller_id}", response_model=List[ProductOrder], tags=["Admin Orders"])
def admin_read_orders_by_reseller(
    reseller_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    return crud_order.get_orders_by_reseller(db, reseller_id=reseller_id, skip=skip, limit=limit)
