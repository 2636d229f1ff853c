"""
Product order lifecycle.

    pending --approve--> active    (creates the provisioned UserProduct)
    pending --reject---> rejected  (requires a reason)

active and rejected are terminal. Both transitions are applied with a
conditional UPDATE on status = 'pending', and approval creates the user
product inside the same transaction, so two concurrent approvals of one
order activate it once and provision it once.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import DEFAULT_COURIER_COUNTRY
from app.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    PartialProvisioningError,
    PersistenceError,
    ValidationError,
)
from app.crud import crud_client, crud_order, crud_product, crud_user_product
from app.models.order import ProductOrder
from app.models.user_product import UserProduct
from app.schemas.order import ProductOrderCreate, ProductOrderCreateInternal, ProductOrderUpdate
from app.schemas.user_product import UserProductCreateInternal

logger = logging.getLogger(__name__)

COURIER_FIELDS = ("address", "contact_name", "contact_phone")


def _is_admin(actor) -> bool:
    return getattr(actor, "role", None) == "admin"


def _filled(value) -> bool:
    return value is not None and str(value).strip() != ""


def _require_admin(actor, order_id: int, action: str) -> None:
    if not _is_admin(actor):
        raise AuthorizationError(
            f"Only administrators can {action} orders",
            order_id=order_id,
            stage=action,
        )


def validate_provisioning(order_in: ProductOrderCreate) -> dict:
    """
    Check that the payload carries exactly the fields its provision_method needs.
    Returns the provisioning columns to store, with the unused ones cleared.
    """
    courier_filled = [field for field in COURIER_FIELDS if _filled(getattr(order_in, field))]

    if order_in.provision_method == "self":
        if not _filled(order_in.sim_number):
            raise ValidationError("A SIM number is required for self provisioning", stage="submit")
        if courier_filled:
            raise ValidationError(
                f"Courier details are not allowed for self provisioning: {', '.join(courier_filled)}",
                stage="submit",
            )
        return {
            "sim_number": order_in.sim_number.strip(),
            "address": None,
            "contact_name": None,
            "contact_phone": None,
            "country": None,
        }

    # courier
    missing = [field for field in COURIER_FIELDS if field not in courier_filled]
    if missing:
        raise ValidationError(
            f"Courier delivery requires: {', '.join(missing)}",
            stage="submit",
        )
    if _filled(order_in.sim_number):
        raise ValidationError("A SIM number is not allowed for courier delivery", stage="submit")
    return {
        "sim_number": None,
        "address": order_in.address.strip(),
        "contact_name": order_in.contact_name.strip(),
        "contact_phone": order_in.contact_phone.strip(),
        "country": order_in.country.strip() if _filled(order_in.country) else DEFAULT_COURIER_COUNTRY,
    }


def submit_order(db: Session, *, order_in: ProductOrderCreate, actor) -> ProductOrder:
    client = crud_client.get_client(db, order_in.client_id)
    if not client:
        raise NotFoundError(f"Client {order_in.client_id} not found", stage="submit")

    if not _is_admin(actor) and client.reseller_id != actor.id:
        raise AuthorizationError(
            f"User {actor.id} cannot order for client {client.id}",
            stage="submit",
        )

    product = crud_product.get_product(db, order_in.product_id)
    if not product:
        raise NotFoundError(f"Product {order_in.product_id} not found", stage="submit")

    provisioning = validate_provisioning(order_in)

    order_internal = ProductOrderCreateInternal(
        client_id=client.id,
        product_id=product.id,
        provision_method=order_in.provision_method,
        reseller_id=client.reseller_id,
        status="pending",
        **provisioning,
    )
    try:
        order = crud_order.create_order(db=db, obj_in=order_internal)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Failed to store order for client ID: {client.id}, product ID: {product.id}: {exc}")
        raise PersistenceError("Failed to store order", stage="submit") from exc

    logger.info(
        f"Order ID: {order.id} submitted by user ID: {actor.id} for client ID: {client.id}, "
        f"product ID: {product.id}, method: {order.provision_method}"
    )
    return order


def _raise_not_pending(db: Session, order_id: int, action: str) -> None:
    order = db.get(ProductOrder, order_id, populate_existing=True)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found", order_id=order_id, stage=action)
    raise ValidationError(
        f"Order {order_id} is already {order.status} and cannot be {action}d",
        order_id=order_id,
        stage=action,
        status=order.status,
    )


def provision(db: Session, order: ProductOrder) -> UserProduct:
    """
    Create the user product for an order that has just become active.
    Only flushes; the caller commits it together with the status change.
    """
    user_product_in = UserProductCreateInternal(
        user_id=order.reseller_id,
        product_id=order.product_id,
        sim_number=order.sim_number,
        status="active",
        comments=f"Provisioned from order #{order.id}",
        source_order_id=order.id,
    )
    return crud_user_product.create_user_product(db=db, obj_in=user_product_in, commit=False)


def approve_order(db: Session, *, order_id: int, actor) -> ProductOrder:
    _require_admin(actor, order_id, "approve")

    try:
        changed = crud_order.transition_pending_order(
            db, order_id=order_id, values={"status": "active", "rejection_reason": None}
        )
        if changed != 1:
            db.rollback()
            _raise_not_pending(db, order_id, "approve")

        order = db.get(ProductOrder, order_id, populate_existing=True)
        try:
            user_product = provision(db, order)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.critical(
                f"Provisioning failed for order ID: {order_id}; status change rolled back, order left pending: {exc}"
            )
            raise PartialProvisioningError(
                "Order could not be provisioned; it has been left pending",
                order_id=order_id,
                stage="provision",
            ) from exc

        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Database error while approving order ID: {order_id}: {exc}")
        raise PersistenceError("Failed to approve order", order_id=order_id, stage="approve") from exc

    logger.info(
        f"Order ID: {order_id} approved by user ID: {actor.id}; "
        f"user product ID: {user_product.id} provisioned for user ID: {user_product.user_id}"
    )
    return crud_order.get_order(db, order_id)


def reject_order(db: Session, *, order_id: int, actor, reason) -> ProductOrder:
    _require_admin(actor, order_id, "reject")

    if not _filled(reason):
        raise ValidationError("A rejection reason is required", order_id=order_id, stage="reject")

    try:
        changed = crud_order.transition_pending_order(
            db, order_id=order_id, values={"status": "rejected", "rejection_reason": reason.strip()}
        )
        if changed != 1:
            db.rollback()
            _raise_not_pending(db, order_id, "reject")
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Database error while rejecting order ID: {order_id}: {exc}")
        raise PersistenceError("Failed to reject order", order_id=order_id, stage="reject") from exc

    logger.info(f"Order ID: {order_id} rejected by user ID: {actor.id}: {reason.strip()}")
    return crud_order.get_order(db, order_id)


def apply_admin_decision(db: Session, *, order_id: int, actor, decision: ProductOrderUpdate) -> ProductOrder:
    """Route the pending-orders screen's {status, rejection_reason} payload to a transition."""
    if decision.status == "active":
        return approve_order(db, order_id=order_id, actor=actor)
    return reject_order(db, order_id=order_id, actor=actor, reason=decision.rejection_reason)
