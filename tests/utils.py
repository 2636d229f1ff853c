import uuid

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.crud import crud_user
from app.models.user import User as UserModel
from app.schemas.user import UserCreate

TEST_PASSWORD = "testpassword123"

def create_test_user(db: Session, role: str = "reseller", reseller_group: int = 1) -> UserModel:
    user_in = UserCreate(
        username=f"{role}_{uuid.uuid4().hex[:8]}",
        email=f"{role}_{uuid.uuid4().hex[:6]}@example.com",
        full_name=f"Test {role.title()}",
        password=TEST_PASSWORD,
        role=role,
        reseller_group=reseller_group,
    )
    return crud_user.create_user(db=db, obj_in=user_in)

def get_token_headers(client: TestClient, user: UserModel) -> dict:
    response = client.post("/api/v1/auth/login", data={"username": user.username, "password": TEST_PASSWORD})
    if response.status_code != 200:
        raise Exception(f"Failed to log in user {user.username} during fixture setup: {response.text}")
    return {"Authorization": f"Bearer {response.json()['access_token']}"}

def self_order_payload(client_id: int, product_id: int, sim_number: str = "8927000000000000001") -> dict:
    return {
        "client_id": client_id,
        "product_id": product_id,
        "provision_method": "self",
        "sim_number": sim_number,
    }

def courier_order_payload(client_id: int, product_id: int, **overrides) -> dict:
    payload = {
        "client_id": client_id,
        "product_id": product_id,
        "provision_method": "courier",
        "address": "12 Long Street, Cape Town",
        "contact_name": "Jane Dlamini",
        "contact_phone": "0825550123",
    }
    payload.update(overrides)
    return payload
