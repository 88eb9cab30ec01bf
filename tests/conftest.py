"""Pytest fixtures for market tests."""

import os

# must be set before market modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from market.data.database import Base, SessionLocal, engine
from market.data.models.product import ProductModel
import market.data.models  # noqa: F401

SELLER_ID = 100
USER_ID = 1
OTHER_USER_ID = 2
ADMIN_ID = 99


@pytest.fixture(autouse=True)
def tables():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_product(db):
    """Insert a product and return its id."""

    def _make(title="Test Product", price="10.00", quantity=5, in_stock=True, seller_id=SELLER_ID):
        product = ProductModel(
            title=title,
            description="A product used in tests",
            price=Decimal(price),
            currency="GHS",
            category="Electronics",
            image="image",
            in_stock=in_stock,
            quantity=quantity,
            seller_id=seller_id,
        )
        db.add(product)
        db.commit()
        return product.id

    return _make


@pytest.fixture
def stock_of():
    """Read a product's current stock in a fresh session."""

    def _stock(product_id):
        session = SessionLocal()
        try:
            return session.get(ProductModel, product_id).quantity
        finally:
            session.close()

    return _stock


@pytest.fixture
def client():
    from market.main import app

    return TestClient(app)


def headers(user_id=USER_ID, admin=False):
    h = {"X-User-Id": str(user_id)}
    if admin:
        h["X-User-Admin"] = "true"
    return h


@pytest.fixture
def user_headers():
    return headers(USER_ID)


@pytest.fixture
def other_headers():
    return headers(OTHER_USER_ID)


@pytest.fixture
def admin_headers():
    return headers(ADMIN_ID, admin=True)


@pytest.fixture
def address():
    return {
        "street": "12 Independence Avenue",
        "city": "Accra",
        "region": "Greater Accra",
        "phone": "+233201234567",
    }
