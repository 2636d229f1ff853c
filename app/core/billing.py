import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import CURRENCY_QUANTUM
from app.core.exceptions import AuthorizationError, NotFoundError, PersistenceError, ValidationError
from app.core.pricing import quote_product
from app.crud import crud_client, crud_product, crud_transaction, crud_user
from app.models.client import ClientProduct
from app.models.user import User
from app.schemas.client import ClientProductCreateInternal
from app.schemas.transaction import TransactionCreate
from app.schemas.user import CreditAdjustment

logger = logging.getLogger(__name__)

_ZERO = Decimal(0)


def _to_amount(value, **context) -> Decimal:
    amount = Decimal(str(value)).quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise ValidationError(f"Amount must be at least {CURRENCY_QUANTUM}, got {value}", **context)
    return amount


def adjust_credit(db: Session, *, user: User, adjustment: CreditAdjustment, actor: User) -> User:
    """
    Add to or subtract from a user's credit balance and record the matching
    credit/debit transaction. Both are committed together.

    The balance is changed by a relative UPDATE in the database; a subtraction only
    applies while the stored balance covers it, so two concurrent deductions can
    never both succeed against the same funds.
    """
    amount = _to_amount(adjustment.amount, user_id=user.id)

    if adjustment.type == "add":
        delta, minimum_balance = amount, None
        transaction_type = "credit"
        description = adjustment.description or "Credit added by admin"
    else:
        delta, minimum_balance = -amount, _ZERO
        transaction_type = "debit"
        description = adjustment.description or "Credit deducted by admin"

    try:
        changed = crud_user.change_credit_balance(
            db, user_id=user.id, delta=delta, minimum_balance=minimum_balance
        )
        if changed:
            crud_transaction.create_transaction(
                db,
                obj_in=TransactionCreate(user_id=user.id, type=transaction_type, amount=amount, description=description),
                commit=False,
            )
            db.commit()
        else:
            db.rollback()
        db.refresh(user)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Failed to adjust credit for user ID: {user.id}: {exc}")
        raise PersistenceError("Failed to update credit balance", user_id=user.id) from exc

    if not changed:
        raise ValidationError(
            f"Insufficient credit balance: available {user.credit_balance}, requested {amount}",
            user_id=user.id,
        )

    logger.info(
        f"User ID: {actor.id} recorded a {transaction_type} of {amount} for user ID: {user.id}; "
        f"balance now {user.credit_balance}"
    )
    return user


def purchase_for_client(
    db: Session,
    *,
    client_id: int,
    product_id: int,
    actor: User,
    reference_date: Optional[date] = None,
) -> ClientProduct:
    """
    Buy a product for a client and assign it to them.

    A reseller pays the pro-rata price for their group on reference_date (today by
    default): the debit, its transaction and the client product are committed
    together, or not at all. Admins assign products without being charged.
    """
    client = crud_client.get_client(db, client_id)
    if not client:
        raise NotFoundError("Client not found", client_id=client_id)
    if not actor.is_admin and client.reseller_id != actor.id:
        raise AuthorizationError("Not authorized to purchase for this client", client_id=client_id)

    product = crud_product.get_product(db, product_id=product_id)
    if not product:
        raise NotFoundError("Product not found", product_id=product_id)

    charged = _ZERO
    try:
        if not actor.is_admin:
            quote = quote_product(product, actor.reseller_group, reference_date or date.today())
            charged = quote.final_price
            if charged > 0:
                changed = crud_user.change_credit_balance(
                    db, user_id=actor.id, delta=-charged, minimum_balance=_ZERO
                )
                if not changed:
                    db.rollback()
                    db.refresh(actor)
                    raise ValidationError(
                        "Insufficient credit balance",
                        client_id=client_id,
                        required=str(charged),
                        available=str(actor.credit_balance),
                    )
                crud_transaction.create_transaction(
                    db,
                    obj_in=TransactionCreate(
                        user_id=actor.id,
                        type="debit",
                        amount=charged,
                        description=f"Purchase of {product.name} for client {client.name}",
                    ),
                    commit=False,
                )

        client_product = crud_client.create_client_product(
            db,
            obj_in=ClientProductCreateInternal(client_id=client.id, product_id=product.id, status="active"),
            commit=False,
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Failed to purchase product ID: {product_id} for client ID: {client_id}: {exc}")
        raise PersistenceError("Failed to record the purchase", client_id=client_id, product_id=product_id) from exc

    db.refresh(client_product)
    logger.info(
        f"User ID: {actor.id} purchased product ID: {product.id} for client ID: {client.id} "
        f"(client product ID: {client_product.id}, charged {charged})"
    )
    return client_product
