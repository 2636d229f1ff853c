import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.crud import crud_order, crud_user_product, crud_client
from app.schemas.client import ClientCreateInternal
from app.models.product import Product
from app.models.client import Client
from tests.utils import create_test_user, get_token_headers, self_order_payload, courier_order_payload

pytestmark = pytest.mark.api

# --- Order Submission (POST /orders/) ---
def test_submit_self_order(
    client: TestClient, reseller_token_headers: tuple, reseller_client: Client, test_product: Product
):
    headers, reseller = reseller_token_headers
    response = client.post("/api/v1/orders/", json=self_order_payload(reseller_client.id, test_product.id), headers=headers)
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["reseller_id"] == reseller.id
    assert data["client_id"] == reseller_client.id
    assert data["provision_method"] == "self"
    assert data["sim_number"] == "8927000000000000001"
    assert data["product"]["id"] == test_product.id
    assert data["client"]["name"] == reseller_client.name

def test_submit_courier_order_defaults_country(
    client: TestClient, reseller_token_headers: tuple, reseller_client: Client, test_product: Product
):
    headers, _ = reseller_token_headers
    response = client.post("/api/v1/orders/", json=courier_order_payload(reseller_client.id, test_product.id), headers=headers)
    assert response.status_code == 201
    assert response.json()["country"] == "South Africa"
    assert response.json()["contact_name"] == "Jane Dlamini"

@pytest.mark.parametrize(
    "payload_changes",
    [
        {"sim_number": None},
        {"address": "1 Main Road"},
        {"provision_method": "courier"},
    ],
)
def test_submit_order_with_mismatched_provisioning_fields(
    client: TestClient, reseller_token_headers: tuple, reseller_client: Client, test_product: Product,
    db_session: Session, payload_changes: dict
):
    headers, _ = reseller_token_headers
    payload = self_order_payload(reseller_client.id, test_product.id)
    payload.update(payload_changes)
    response = client.post("/api/v1/orders/", json=payload, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"]["stage"] == "submit"
    assert crud_order.get_orders(db_session) == []

def test_submit_order_unknown_provision_method(
    client: TestClient, reseller_token_headers: tuple, reseller_client: Client, test_product: Product
):
    headers, _ = reseller_token_headers
    payload = self_order_payload(reseller_client.id, test_product.id)
    payload["provision_method"] = "drone"
    response = client.post("/api/v1/orders/", json=payload, headers=headers)
    assert response.status_code == 422

def test_submit_order_for_someone_elses_client(
    client: TestClient, reseller_token_headers: tuple, test_product: Product, db_session: Session
):
    headers, _ = reseller_token_headers
    other_reseller = create_test_user(db_session)
    foreign_client = crud_client.create_client(db=db_session, obj_in=ClientCreateInternal(name="Foreign", reseller_id=other_reseller.id))

    response = client.post("/api/v1/orders/", json=self_order_payload(foreign_client.id, test_product.id), headers=headers)
    assert response.status_code == 403

def test_submit_order_unknown_product(client: TestClient, reseller_token_headers: tuple, reseller_client: Client):
    headers, _ = reseller_token_headers
    response = client.post("/api/v1/orders/", json=self_order_payload(reseller_client.id, 99999), headers=headers)
    assert response.status_code == 404
    assert "Product 99999 not found" in response.json()["detail"]["message"]

def test_submit_order_unauthenticated(client: TestClient, db_session: Session):
    response = client.post("/api/v1/orders/", json=self_order_payload(1, 1))
    assert response.status_code == 401


# --- Reading Orders ---
@pytest.fixture(scope="function")
def submitted_order(client: TestClient, reseller_token_headers: tuple, reseller_client: Client, test_product: Product) -> dict:
    headers, _ = reseller_token_headers
    response = client.post("/api/v1/orders/", json=self_order_payload(reseller_client.id, test_product.id), headers=headers)
    assert response.status_code == 201
    return response.json()

def test_read_my_orders(client: TestClient, reseller_token_headers: tuple, submitted_order: dict):
    headers, _ = reseller_token_headers
    response = client.get("/api/v1/orders/mine", headers=headers)
    assert response.status_code == 200
    assert [o["id"] for o in response.json()] == [submitted_order["id"]]

    response_active = client.get("/api/v1/orders/mine?status=active", headers=headers)
    assert response_active.status_code == 200
    assert response_active.json() == []

def test_read_order_details_owner_and_admin(
    client: TestClient, reseller_token_headers: tuple, admin_token_headers: tuple, submitted_order: dict
):
    for headers, _ in (reseller_token_headers, admin_token_headers):
        response = client.get(f"/api/v1/orders/{submitted_order['id']}", headers=headers)
        assert response.status_code == 200
        assert response.json()["id"] == submitted_order["id"]

def test_read_order_details_other_reseller_forbidden(client: TestClient, db_session: Session, submitted_order: dict):
    other_headers = get_token_headers(client, create_test_user(db_session))
    response = client.get(f"/api/v1/orders/{submitted_order['id']}", headers=other_headers)
    assert response.status_code == 403

def test_read_order_not_found(client: TestClient, admin_token_headers: tuple):
    headers, _ = admin_token_headers
    assert client.get("/api/v1/orders/99999", headers=headers).status_code == 404

def test_admin_pending_queue(client: TestClient, admin_token_headers: tuple, reseller_token_headers: tuple, submitted_order: dict):
    admin_headers, _ = admin_token_headers
    response = client.get("/api/v1/orders/?status=pending", headers=admin_headers)
    assert response.status_code == 200
    assert [o["id"] for o in response.json()] == [submitted_order["id"]]

    reseller_headers, _ = reseller_token_headers
    assert client.get("/api/v1/orders/", headers=reseller_headers).status_code == 403

    _, reseller = reseller_token_headers
    by_reseller = client.get(f"/api/v1/orders/admin/by-reseller/{reseller.id}", headers=admin_headers)
    assert [o["id"] for o in by_reseller.json()] == [submitted_order["id"]]


# --- Admin Decisions ---
def test_approve_order_provisions_user_product(
    client: TestClient, admin_token_headers: tuple, submitted_order: dict, db_session: Session
):
    headers, _ = admin_token_headers
    response = client.post(f"/api/v1/orders/{submitted_order['id']}/approve", headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "active"

    db_session.expire_all()
    user_products = crud_user_product.get_user_products_by_order(db_session, order_id=submitted_order["id"])
    assert len(user_products) == 1
    assert user_products[0].user_id == submitted_order["reseller_id"]
    assert user_products[0].sim_number == submitted_order["sim_number"]

def test_approve_order_twice(client: TestClient, admin_token_headers: tuple, submitted_order: dict, db_session: Session):
    headers, _ = admin_token_headers
    assert client.post(f"/api/v1/orders/{submitted_order['id']}/approve", headers=headers).status_code == 200

    response = client.post(f"/api/v1/orders/{submitted_order['id']}/approve", headers=headers)
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["order_id"] == submitted_order["id"]
    assert detail["status"] == "active"

    db_session.expire_all()
    assert len(crud_user_product.get_user_products_by_order(db_session, order_id=submitted_order["id"])) == 1

def test_reseller_cannot_approve(client: TestClient, reseller_token_headers: tuple, submitted_order: dict):
    headers, _ = reseller_token_headers
    response = client.post(f"/api/v1/orders/{submitted_order['id']}/approve", headers=headers)
    assert response.status_code == 403

def test_reject_order(client: TestClient, admin_token_headers: tuple, submitted_order: dict, db_session: Session):
    headers, _ = admin_token_headers
    response = client.post(
        f"/api/v1/orders/{submitted_order['id']}/reject", json={"reason": "No fibre in area"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "rejected"
    assert response.json()["rejection_reason"] == "No fibre in area"

    db_session.expire_all()
    assert crud_user_product.get_user_products_by_order(db_session, order_id=submitted_order["id"]) == []

def test_reject_order_blank_reason(client: TestClient, admin_token_headers: tuple, submitted_order: dict):
    headers, _ = admin_token_headers
    response = client.post(f"/api/v1/orders/{submitted_order['id']}/reject", json={"reason": "  "}, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"]["stage"] == "reject"

def test_patch_order_decision(client: TestClient, admin_token_headers: tuple, submitted_order: dict):
    headers, _ = admin_token_headers
    response = client.patch(
        f"/api/v1/orders/{submitted_order['id']}",
        json={"status": "rejected", "rejection_reason": "Duplicate order"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "rejected"

    # rejected is terminal
    response_again = client.patch(f"/api/v1/orders/{submitted_order['id']}", json={"status": "active"}, headers=headers)
    assert response_again.status_code == 400

def test_patch_order_cannot_set_pending(client: TestClient, admin_token_headers: tuple, submitted_order: dict):
    headers, _ = admin_token_headers
    response = client.patch(f"/api/v1/orders/{submitted_order['id']}", json={"status": "pending"}, headers=headers)
    assert response.status_code == 422

def test_approve_unknown_order(client: TestClient, admin_token_headers: tuple):
    headers, _ = admin_token_headers
    response = client.post("/api/v1/orders/99999/approve", headers=headers)
    assert response.status_code == 404
