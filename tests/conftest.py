from datetime import datetime
from decimal import Decimal
from functools import lru_cache
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from foodhub.database import Base, get_db
from foodhub.main import app
from foodhub.models import Account, AccountRole, Customer, Merchant, MerchantProduct, Product, Vendor
from foodhub.utils.security import create_access_token, get_password_hash

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def enforce_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES clauses unless asked, Postgres always enforces them
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0)
ACCOUNT_PASSWORD = "s3cret-password"


@lru_cache()
def account_password_hash() -> str:
    # Low work factor, hashing is not under test here
    return get_password_hash(ACCOUNT_PASSWORD, rounds=4)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def catalog(db):
    """Two vendors, one outlet each, and a product created by each vendor"""
    burger_co = Vendor(name="Burger Co")
    pizza_co = Vendor(name="Pizza Co")
    db.add_all([burger_co, pizza_co])
    db.flush()

    burger_outlet = Merchant(
        vendor_id=burger_co.id,
        outlet_name="Burger Co Downtown",
        latitude=0.0,
        longitude=0.0,
        delivery_radius_meters=5000,
    )
    pizza_outlet = Merchant(
        vendor_id=pizza_co.id,
        outlet_name="Pizza Co Harbour",
        latitude=0.0,
        longitude=0.02,
        delivery_radius_meters=1000,
    )
    db.add_all([burger_outlet, pizza_outlet])
    db.flush()

    burger = Product(name="Classic Burger", created_by_vendor_id=burger_co.id, base_price=Decimal("10.00"))
    fries = Product(name="Fries", created_by_vendor_id=burger_co.id, base_price=Decimal("3.00"))
    pizza = Product(name="Margherita", created_by_vendor_id=pizza_co.id, base_price=Decimal("12.00"))
    db.add_all([burger, fries, pizza])
    db.flush()

    burger_listing = MerchantProduct(merchant_id=burger_outlet.id, product_id=burger.id, price=Decimal("10.00"))
    fries_listing = MerchantProduct(merchant_id=burger_outlet.id, product_id=fries.id)
    pizza_listing = MerchantProduct(merchant_id=pizza_outlet.id, product_id=pizza.id)
    db.add_all([burger_listing, fries_listing, pizza_listing])

    customer = Customer(name="Ada Customer", email="ada@foodhub.com")
    db.add(customer)
    db.commit()

    return SimpleNamespace(
        burger_co=burger_co,
        pizza_co=pizza_co,
        burger_outlet=burger_outlet,
        pizza_outlet=pizza_outlet,
        burger=burger,
        fries=fries,
        pizza=pizza,
        burger_listing=burger_listing,
        fries_listing=fries_listing,
        pizza_listing=pizza_listing,
        customer=customer,
    )


def _create_account(db, email: str, role: AccountRole, is_active: bool = True) -> Account:
    account = Account(
        email=email,
        password_hash=account_password_hash(),
        name=email.split("@")[0].title(),
        role=role,
        is_active=is_active,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def auth_headers(account: Account) -> dict:
    token = create_access_token({"sub": account.id, "email": account.email, "role": account.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def service_account(db):
    return _create_account(db, "web-backend@foodhub.com", AccountRole.SERVICE)


@pytest.fixture
def admin_account(db):
    return _create_account(db, "admin@foodhub.com", AccountRole.ADMIN)


@pytest.fixture
def inactive_account(db):
    return _create_account(db, "retired@foodhub.com", AccountRole.SERVICE, is_active=False)


@pytest.fixture
def service_headers(service_account):
    return auth_headers(service_account)


@pytest.fixture
def admin_headers(admin_account):
    return auth_headers(admin_account)


def cart_payload(catalog, **overrides) -> dict:
    """camelCase add-to-cart body for a burger at the burger outlet"""
    payload = {
        "customerId": catalog.customer.id,
        "merchantId": catalog.burger_outlet.id,
        "productId": catalog.burger.id,
        "merchantProductId": catalog.burger_listing.id,
        "quantity": 1,
        "priceAtAdd": "10.00",
    }
    payload.update(overrides)
    return payload
