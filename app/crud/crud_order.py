from sqlalchemy.orm import Session, joinedload
from typing import Optional, List

from app.models.order import ProductOrder
from app.schemas.order import ProductOrderCreateInternal

def create_order(db: Session, *, obj_in: ProductOrderCreateInternal) -> ProductOrder:
    """
    Create a new product order.
    obj_in should be of type ProductOrderCreateInternal which includes the reseller.
    """
    db_obj = ProductOrder(**obj_in.model_dump())
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def get_order(db: Session, order_id: int) -> Optional[ProductOrder]:
    """
    Get a single order by ID, with related product and client data eagerly loaded.
    """
    return (
        db.query(ProductOrder)
        .options(
            joinedload(ProductOrder.product),
            joinedload(ProductOrder.client)
        )
        .filter(ProductOrder.id == order_id)
        .first()
    )

def get_orders(
    db: Session, *, status: Optional[str] = None, skip: int = 0, limit: int = 100
) -> List[ProductOrder]:
    """
    Get all orders, newest first, optionally filtered by status. Admin view.
    """
    query = db.query(ProductOrder).options(
        joinedload(ProductOrder.product),
        joinedload(ProductOrder.client)
    )
    if status:
        query = query.filter(ProductOrder.status == status)
    return query.order_by(ProductOrder.created_at.desc(), ProductOrder.id.desc()).offset(skip).limit(limit).all()

def get_orders_by_reseller(
    db: Session, *, reseller_id: int, status: Optional[str] = None, skip: int = 0, limit: int = 100
) -> List[ProductOrder]:
    """
    Get a list of orders for a specific reseller, ordered by creation date descending.
    """
    query = (
        db.query(ProductOrder)
        .options(
            joinedload(ProductOrder.product),
            joinedload(ProductOrder.client)
        )
        .filter(ProductOrder.reseller_id == reseller_id)
    )
    if status:
        query = query.filter(ProductOrder.status == status)
    return query.order_by(ProductOrder.created_at.desc(), ProductOrder.id.desc()).offset(skip).limit(limit).all()

def get_order_count_for_reseller(db: Session, *, reseller_id: int) -> int:
    return db.query(ProductOrder).filter(ProductOrder.reseller_id == reseller_id).count()

def transition_pending_order(db: Session, *, order_id: int, values: dict) -> int:
    """
    Apply `values` to the order only while it is still pending.
    Issues a single conditional UPDATE and returns the number of rows changed (0 or 1).
    Does not commit: the caller owns the transaction.
    """
    return (
        db.query(ProductOrder)
        .filter(ProductOrder.id == order_id, ProductOrder.status == "pending")
        .update(values, synchronize_session=False)
    )
