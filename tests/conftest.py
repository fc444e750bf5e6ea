"""Pytest fixtures for the boutique API tests."""

import os
import time
import uuid
from decimal import Decimal

# Settings are read at import time; configure before importing the app
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ADMIN_EMAILS", "owner@alfalah.in")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlmodel import Session, SQLModel

from boutique.core.notifications import get_notifier
from boutique.database import build_engine, get_session
from boutique.main import app
from boutique.models.coupon import Coupon
from boutique.models.product import Product

SHOPPER_ID = uuid.UUID("11111111-1111-4111-8111-111111111111")
OTHER_SHOPPER_ID = uuid.UUID("22222222-2222-4222-8222-222222222222")
ADMIN_ID = uuid.UUID("33333333-3333-4333-8333-333333333333")


def make_token(user_id: uuid.UUID, email: str, **claims) -> str:
    payload = {
        "sub": str(user_id),
        "email": email,
        "exp": int(time.time()) + 3600,
        **claims,
    }
    return jwt.encode(payload, os.environ["SUPABASE_JWT_SECRET"], algorithm="HS256")


def auth_headers(user_id: uuid.UUID, email: str, **claims) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, email, **claims)}"}


class FakeNotifier:
    """Records notification payloads instead of calling the edge function."""

    def __init__(self):
        self.sent: list[dict] = []

    def notify(self, payload: dict) -> bool:
        self.sent.append(payload)
        return True


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def client(engine, notifier):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def shopper_headers():
    return auth_headers(
        SHOPPER_ID, "ayesha@example.com", user_metadata={"full_name": "Ayesha Khan"}
    )


@pytest.fixture
def other_shopper_headers():
    return auth_headers(OTHER_SHOPPER_ID, "zara@example.com")


@pytest.fixture
def admin_headers():
    return auth_headers(ADMIN_ID, "owner@alfalah.in")


@pytest.fixture
def make_product(session):
    """Insert a product directly and return it."""

    def _make(
        title: str = "Embroidered Kurta",
        price: str = "500",
        available: bool = True,
        category: str = "readymade",
    ) -> Product:
        product = Product(
            title=title,
            price=Decimal(price),
            available=available,
            category=category,
            images=["https://cdn.example.com/kurta.jpg"],
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_coupon(session):
    """Insert a coupon row directly and return it."""

    def _make(code: str = "SAVE20", **fields) -> Coupon:
        values = {
            "discount_type": "percentage",
            "discount_value": Decimal("20"),
            "min_purchase": Decimal("0"),
            "active": True,
        }
        values.update(fields)
        coupon = Coupon(code=code, **values)
        session.add(coupon)
        session.commit()
        session.refresh(coupon)
        return coupon

    return _make


@pytest.fixture
def fill_cart(client, shopper_headers):
    """Add (product, quantity) pairs to the shopper's cart through the API."""

    def _fill(*entries):
        for product, quantity in entries:
            response = client.post(
                "/api/v1/cart",
                json={"product_id": str(product.id), "quantity": quantity},
                headers=shopper_headers,
            )
            assert response.status_code == 200, response.text

    return _fill
