"""Pytest configuration and fixtures."""

import os

# Must be set before the app modules read settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("EMAIL_SERVICE", "disabled")
os.environ.setdefault("JWT_SECRET", "test-secret-0123456789abcdef0123456789")

from decimal import Decimal

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.api.deps import get_payment_client
from app.config import settings
from app.database import Base, get_db
from app.exceptions import ExternalServiceError
from app.main import app
from app.models.product import Product, ProductSize
from app.schemas.order import Address, OrderCreate
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService


class FakePaymentClient:
    """In-memory stand-in for the payment provider"""

    def __init__(self):
        self.created = []
        self.statuses = {}
        self.fail = False
        self._counter = 0

    async def create_link(self, order_id, amount, items, currency=None):
        if self.fail:
            raise ExternalServiceError("Payment provider unavailable: connection refused")
        self._counter += 1
        payment_id = f"link_{self._counter}"
        self.created.append({"order_id": order_id, "amount": amount, "items": items, "payment_id": payment_id})
        return {"payment_id": payment_id, "payment_url": f"https://pay.example.com/{payment_id}"}

    async def get_link_status(self, payment_id):
        if self.fail:
            raise ExternalServiceError("Payment provider unavailable: connection refused")
        return self.statuses.get(payment_id, "pending")


class RecordingNotifier:
    """Collects notifications instead of sending them"""

    def __init__(self, fail=False):
        self.fail = fail
        self.confirmed = []
        self.status_changes = []

    def send_order_confirmed(self, order_data):
        if self.fail:
            raise RuntimeError("SMTP down")
        self.confirmed.append(order_data)
        return True

    def send_order_status_changed(self, order_data):
        if self.fail:
            raise RuntimeError("SMTP down")
        self.status_changes.append(order_data)
        return True


@pytest.fixture
def engine():
    """In-memory SQLite shared across sessions."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def payment_client():
    return FakePaymentClient()


@pytest.fixture
def order_service(db, notifier):
    return OrderService(db, notifier=notifier)


@pytest.fixture
def payment_service(db, payment_client, order_service):
    return PaymentService(db, payment_client=payment_client, order_service=order_service)


@pytest.fixture
def make_product(db):
    """Create a product with a 250g (50.00) and a 500g (100.00) size."""

    def _make(stock=10, sizes=((250, "50.00"), (500, "100.00")), name="Dog Treats"):
        product = Product(name=name, brand="Earth", description="Crunchy", stock=stock)
        product.sizes = [ProductSize(weight=weight, price=Decimal(price)) for weight, price in sizes]
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def address():
    return Address(
        street="1 Palm Street",
        city="Dubai",
        state="Dubai",
        country="AE",
        zip_code="00000",
        phone="+971500000000",
    )


@pytest.fixture
def place_order(order_service, address):
    """Create an order through the service and return the OrderCreatedResponse."""

    def _place(product, quantity=3, size="500", user_id="user-1", amount=None, **extra):
        return order_service.create_order(
            user_id,
            OrderCreate(
                product_id=product.id,
                size_selected=size,
                quantity=quantity,
                address=address,
                amount=amount,
                **extra,
            ),
        )

    return _place


@pytest.fixture
def enable_test_payments(monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_TEST_PAYMENTS", True)
    monkeypatch.setattr(settings, "ENVIRONMENT", "test")


def make_token(user_id="user-1", role=None):
    payload = {"sub": user_id}
    if role:
        payload["role"] = role
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_headers(user_id="user-1", role=None):
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


@pytest.fixture
def client(session_factory, payment_client):
    """FastAPI test client bound to the test database and fake provider."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_client] = lambda: payment_client

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    """Build Authorization headers: auth("user-1") or auth("admin", role="admin")."""
    return auth_headers
