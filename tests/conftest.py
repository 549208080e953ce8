import os

# must be set before souq.utils.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DISPLAY_TAX_RATE"] = "0.10"

import pytest
from fastapi.testclient import TestClient

from souq.data.database import Base, SessionLocal, engine
from souq.data.models import CartItemModel, CartModel, ProductModel, UserModel
from souq.main import app
from souq.services import notification_service, price_repair


class RecordingTask:
    """Stands in for a Celery task so nothing reaches a broker."""

    def __init__(self, error: Exception | None = None):
        self.calls = []
        self.error = error

    def delay(self, *args):
        if self.error:
            raise self.error
        self.calls.append(args)


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(autouse=True)
def reprice_task(monkeypatch):
    task = RecordingTask()
    monkeypatch.setattr(price_repair, "persist_item_prices_task", task)
    return task


@pytest.fixture(autouse=True)
def notify_task(monkeypatch):
    task = RecordingTask()
    monkeypatch.setattr(notification_service, "send_order_notification_task", task)
    return task


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _user(db, first_name, email, role):
    user = UserModel(first_name=first_name, last_name="Test", email=email, role=role)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def admin(db):
    return _user(db, "Amal", "admin@example.com", "admin")


@pytest.fixture
def customer(db):
    return _user(db, "Omar", "omar@example.com", "user")


@pytest.fixture
def other_customer(db):
    return _user(db, "Lina", "lina@example.com", "user")


def headers(user, lang=None):
    h = {"X-User-Id": str(user.id)}
    if lang:
        h["Accept-Language"] = lang
    return h


PHONE_VARIANTS = [
    {
        "name": {"en": "Storage", "ar": "السعة"},
        "options": [
            {
                "sku": "PH-128",
                "price": 100,
                "price_after_discount": 90,
                "stock": 5,
                "value": "128GB",
                "storage": "128GB",
                "ram": "8GB",
                "variant_images": ["ph-128.png"],
            },
            {"sku": "PH-256", "price": 150, "price_after_discount": None, "stock": 2, "storage": "256GB"},
        ],
    },
    {
        "name": {"en": "Color", "ar": "اللون"},
        "options": [
            {"sku": "PH-BLK", "price": 100, "stock": 1, "color_name": {"en": "Black", "ar": "أسود"}, "color_hex": "#000000"},
        ],
    },
]


@pytest.fixture
def phone(db):
    product = ProductModel(
        name={"en": "Phone X", "ar": "هاتف إكس"},
        images=["phone.png"],
        variants=PHONE_VARIANTS,
    )
    db.add(product)
    db.commit()
    return product


@pytest.fixture
def legacy_cart(db, customer, phone):
    """Cart whose first line was stored without a price."""
    cart = CartModel(user_id=customer.id, status="active", discount=0)
    cart.items = [
        CartItemModel(product_id=phone.id, sku="PH-128", quantity=2, price=0),
        CartItemModel(product_id=phone.id, sku="GONE-1", quantity=1, price=30),
    ]
    db.add(cart)
    db.commit()
    return cart
