import os

# Must be set before the app (and its settings) are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CART_STORAGE_BACKEND"] = "database"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["RAZORPAY_KEY_SECRET"] = "test_secret"

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from app.db.session import engine, get_session
from app.main import app
from app.models.coupon import Coupon, DiscountType
from app.models.product import Product


@pytest.fixture
def session():
    """Fresh in-memory database per test."""
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client(session):
    def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_coupon(session):
    def _make(**overrides):
        values = dict(
            code="SAVE10",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=10,
            min_order_amount=999,
            max_uses=100,
            used_count=50,
            expires_at=datetime(2099, 1, 1, tzinfo=timezone.utc),
            is_active=True,
        )
        values.update(overrides)
        coupon = Coupon(**values)
        session.add(coupon)
        session.commit()
        session.refresh(coupon)
        return coupon
    return _make


@pytest.fixture
def tshirt(session):
    product = Product(
        name="Custom Printed T-Shirt",
        slug="custom-tshirt",
        category="t-shirts",
        base_price=500,
        images=["https://cdn.example.com/tshirt.webp"],
        sizes=[{"name": "M", "price": 0}, {"name": "L", "price": 50}],
        variants=[{"name": "White", "price": 0, "hex": "#ffffff"}, {"name": "Black", "price": 30, "hex": "#000000"}],
        variant_images={
            "color:black,size:l": ["https://cdn.example.com/black-l.webp"],
            "color:Black": ["https://cdn.example.com/black.webp"],
            "default": ["https://cdn.example.com/default.webp"],
        },
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product
