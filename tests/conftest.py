import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient
from decimal import Decimal
import uuid

from app.main import app
from app.db.base import Base  # every model registered on the metadata
from app.db.session import get_db, enable_sqlite_foreign_keys
from app.crud import crud_category, crud_product, crud_client, crud_api_setting
from app.schemas.category import ProductCategoryCreate
from app.schemas.product import ProductCreate
from app.schemas.client import ClientCreateInternal
from app.schemas.api_setting import ApiSettingCreate
from app.models.user import User as UserModel
from app.models.category import ProductCategory as ProductCategoryModel
from app.models.product import Product as ProductModel
from app.models.client import Client as ClientModel
from app.models.api_setting import ApiSetting as ApiSettingModel
from tests.utils import create_test_user, get_token_headers

# Use a separate SQLite database for testing
TEST_SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False, "timeout": 15}
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base.metadata.create_all(bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

@pytest.fixture(scope="session")
def test_engine():
    Base.metadata.create_all(bind=engine)
    yield engine

@pytest.fixture(scope="function")
def db_session(test_engine):
    """
    A session on a freshly created schema. Tables are dropped and recreated
    for every test, so rows committed by the API in one test never leak into another.
    """
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture(scope="function")
def client():
    with TestClient(app) as c:
        yield c

def _create_user_and_get_token(db: Session, client: TestClient, role: str = "reseller"):
    user = create_test_user(db, role=role)
    return get_token_headers(client, user), user

@pytest.fixture(scope="function")
def reseller_token_headers(db_session: Session, client: TestClient):
    return _create_user_and_get_token(db_session, client, role="reseller")

@pytest.fixture(scope="function")
def admin_token_headers(db_session: Session, client: TestClient):
    return _create_user_and_get_token(db_session, client, role="admin")

@pytest.fixture(scope="function")
def test_reseller(reseller_token_headers: tuple) -> UserModel:
    return reseller_token_headers[1]

@pytest.fixture(scope="function")
def test_admin(admin_token_headers: tuple) -> UserModel:
    return admin_token_headers[1]

@pytest.fixture(scope="function")
def test_category(db_session: Session) -> ProductCategoryModel:
    return crud_category.create_category(db=db_session, obj_in=ProductCategoryCreate(
        name=f"Fibre {uuid.uuid4().hex[:6]}",
        master_category="MTN Fixed",
        description="Uncapped fibre packages",
    ))

@pytest.fixture(scope="function")
def test_product(db_session: Session, test_category: ProductCategoryModel) -> ProductModel:
    product_in = ProductCreate(
        name=f"Fibre 50Mbps {uuid.uuid4().hex[:6]}",
        description="50Mbps uncapped",
        base_price=Decimal("100.00"),
        group1_price=Decimal("80.00"),
        group2_price=Decimal("90.00"),
        category_id=test_category.id,
        api_endpoint="/fibre/provision",
        api_identifier="FIBRE50",
    )
    return crud_product.create_product(db=db_session, obj_in=product_in)

@pytest.fixture(scope="function")
def reseller_client(db_session: Session, test_reseller: UserModel) -> ClientModel:
    """A client belonging to test_reseller."""
    return crud_client.create_client(db=db_session, obj_in=ClientCreateInternal(
        name="Acme Holdings",
        email="accounts@acme.example.com",
        phone="0115550101",
        address="1 Main Road, Johannesburg",
        reseller_id=test_reseller.id,
    ))

@pytest.fixture(scope="function")
def test_api_setting(db_session: Session) -> ApiSettingModel:
    return crud_api_setting.create_api_setting(db=db_session, obj_in=ApiSettingCreate(
        name="Fixed provisioning",
        endpoint="/fixed",
        master_category="MTN Fixed",
    ))

