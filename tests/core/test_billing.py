import pytest
import threading
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from sqlalchemy.orm import Session, sessionmaker

from app.core.billing import adjust_credit, purchase_for_client
from app.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.core.pricing import quote_product
from app.crud import crud_client, crud_transaction, crud_user
from app.models.client import ClientProduct
from app.schemas.client import ClientCreateInternal
from app.schemas.user import CreditAdjustment
from tests.utils import create_test_user

pytestmark = pytest.mark.core

@pytest.fixture
def reseller(db_session: Session):
    return create_test_user(db_session, role="reseller")

@pytest.fixture
def admin(db_session: Session):
    return create_test_user(db_session, role="admin")


def test_add_credit_records_credit_transaction(db_session: Session, reseller, admin):
    user = adjust_credit(
        db_session, user=reseller, adjustment=CreditAdjustment(amount=Decimal("150.50"), type="add"), actor=admin
    )
    assert user.credit_balance == Decimal("150.50")

    transactions = crud_transaction.get_transactions_by_user(db_session, user_id=reseller.id)
    assert len(transactions) == 1
    assert transactions[0].type == "credit"
    assert transactions[0].amount == Decimal("150.50")
    assert transactions[0].description == "Credit added by admin"

def test_subtract_credit_records_debit(db_session: Session, reseller, admin):
    adjust_credit(db_session, user=reseller, adjustment=CreditAdjustment(amount=100, type="add"), actor=admin)
    user = adjust_credit(
        db_session,
        user=reseller,
        adjustment=CreditAdjustment(amount=Decimal("40"), type="subtract", description="Monthly fee"),
        actor=admin,
    )
    assert user.credit_balance == Decimal("60.00")

    latest = crud_transaction.get_transactions_by_user(db_session, user_id=reseller.id)[0]
    assert latest.type == "debit"
    assert latest.amount == Decimal("40.00")
    assert latest.description == "Monthly fee"

def test_subtract_more_than_balance_is_refused(db_session: Session, reseller, admin):
    adjust_credit(db_session, user=reseller, adjustment=CreditAdjustment(amount=10, type="add"), actor=admin)
    with pytest.raises(ValidationError) as exc_info:
        adjust_credit(db_session, user=reseller, adjustment=CreditAdjustment(amount=Decimal("10.01"), type="subtract"), actor=admin)
    assert "Insufficient" in exc_info.value.message

    db_session.expire_all()
    assert reseller.credit_balance == Decimal("10.00")
    assert len(crud_transaction.get_transactions_by_user(db_session, user_id=reseller.id)) == 1

def test_recent_transactions_span_users(db_session: Session, reseller, admin):
    other = create_test_user(db_session, role="reseller")
    adjust_credit(db_session, user=reseller, adjustment=CreditAdjustment(amount=5, type="add"), actor=admin)
    adjust_credit(db_session, user=other, adjustment=CreditAdjustment(amount=7, type="add"), actor=admin)

    recent = crud_transaction.get_recent_transactions(db_session, limit=10)
    assert {t.user_id for t in recent} == {reseller.id, other.id}
    assert len(crud_transaction.get_recent_transactions(db_session, limit=1)) == 1

def test_concurrent_subtractions_cannot_overdraw(db_session: Session, reseller, admin):
    adjust_credit(db_session, user=reseller, adjustment=CreditAdjustment(amount=100, type="add"), actor=admin)

    SessionForThread = sessionmaker(autocommit=False, autoflush=False, bind=db_session.get_bind())
    actor = SimpleNamespace(id=admin.id, role="admin")
    user_id = reseller.id
    barrier = threading.Barrier(2)
    results = []

    def subtract():
        session = SessionForThread()
        try:
            user = crud_user.get_user(session, user_id=user_id)
            barrier.wait()
            adjust_credit(session, user=user, adjustment=CreditAdjustment(amount=80, type="subtract"), actor=actor)
            results.append("ok")
        except ValidationError:
            results.append("refused")
        finally:
            session.close()

    threads = [threading.Thread(target=subtract) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(results) == ["ok", "refused"]
    db_session.expire_all()
    assert crud_user.get_user(db_session, user_id=user_id).credit_balance == Decimal("20.00")
    debits = [t for t in crud_transaction.get_transactions_by_user(db_session, user_id=user_id) if t.type == "debit"]
    assert len(debits) == 1

def test_amount_rounding_to_zero_is_refused(db_session: Session, reseller, admin):
    # Bypasses schema validation the way an internal caller could
    adjustment = CreditAdjustment.model_construct(amount=Decimal("0.004"), type="add", description=None)
    with pytest.raises(ValidationError):
        adjust_credit(db_session, user=reseller, adjustment=adjustment, actor=admin)

    db_session.expire_all()
    assert reseller.credit_balance == Decimal("0.00")
    assert crud_transaction.get_transactions_by_user(db_session, user_id=reseller.id) == []

def test_amounts_round_half_up_to_cents(db_session: Session, reseller, admin):
    adjustment = CreditAdjustment.model_construct(amount=Decimal("0.125"), type="add", description=None)
    user = adjust_credit(db_session, user=reseller, adjustment=adjustment, actor=admin)
    assert user.credit_balance == Decimal("0.13")
    assert crud_transaction.get_transactions_by_user(db_session, user_id=reseller.id)[0].amount == Decimal("0.13")


@pytest.fixture
def acme(db_session: Session, reseller):
    return crud_client.create_client(db=db_session, obj_in=ClientCreateInternal(name="Acme Holdings", reseller_id=reseller.id))

PURCHASE_DATE = date(2024, 4, 15)  # 50% through a 30-day month

def test_purchase_debits_quoted_price(db_session: Session, reseller, admin, acme, test_product):
    adjust_credit(db_session, user=reseller, adjustment=CreditAdjustment(amount=100, type="add"), actor=admin)
    expected = quote_product(test_product, reseller.reseller_group, PURCHASE_DATE).final_price
    assert expected == Decimal("40.00")  # group 1 price 80.00, half off

    client_product = purchase_for_client(
        db_session, client_id=acme.id, product_id=test_product.id, actor=reseller, reference_date=PURCHASE_DATE
    )
    assert client_product.client_id == acme.id
    assert client_product.product_id == test_product.id
    assert client_product.status == "active"

    db_session.expire_all()
    assert reseller.credit_balance == Decimal("60.00")
    debit = crud_transaction.get_transactions_by_user(db_session, user_id=reseller.id)[0]
    assert debit.type == "debit"
    assert debit.amount == expected
    assert debit.description == f"Purchase of {test_product.name} for client Acme Holdings"

def test_purchase_with_insufficient_credit_changes_nothing(db_session: Session, reseller, admin, acme, test_product):
    adjust_credit(db_session, user=reseller, adjustment=CreditAdjustment(amount=Decimal("39.99"), type="add"), actor=admin)

    with pytest.raises(ValidationError) as exc_info:
        purchase_for_client(
            db_session, client_id=acme.id, product_id=test_product.id, actor=reseller, reference_date=PURCHASE_DATE
        )
    assert exc_info.value.message == "Insufficient credit balance"
    assert Decimal(exc_info.value.context["required"]) == Decimal("40.00")
    assert Decimal(exc_info.value.context["available"]) == Decimal("39.99")

    db_session.expire_all()
    assert reseller.credit_balance == Decimal("39.99")
    assert len(crud_transaction.get_transactions_by_user(db_session, user_id=reseller.id)) == 1
    assert db_session.query(ClientProduct).count() == 0

def test_admin_purchase_is_not_charged(db_session: Session, reseller, admin, acme, test_product):
    client_product = purchase_for_client(db_session, client_id=acme.id, product_id=test_product.id, actor=admin)
    assert client_product.status == "active"
    assert crud_transaction.get_transactions_by_user(db_session, user_id=admin.id) == []
    assert crud_transaction.get_transactions_by_user(db_session, user_id=reseller.id) == []

def test_purchase_checks_client_and_product(db_session: Session, reseller, acme, test_product):
    with pytest.raises(NotFoundError):
        purchase_for_client(db_session, client_id=99999, product_id=test_product.id, actor=reseller)
    with pytest.raises(NotFoundError):
        purchase_for_client(db_session, client_id=acme.id, product_id=99999, actor=reseller)

    stranger = create_test_user(db_session, role="reseller")
    with pytest.raises(AuthorizationError):
        purchase_for_client(db_session, client_id=acme.id, product_id=test_product.id, actor=stranger)
    assert db_session.query(ClientProduct).count() == 0
