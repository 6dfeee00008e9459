"""
Pytest configuration and fixtures.

Every test gets its own SQLite file database; settings are pinned through
environment variables before any application module is imported.
"""
import os
import tempfile
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", f"sqlite:///{tempfile.mkdtemp()}/shop-default.db")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("DB_POOL_SIZE", "20")
os.environ.setdefault("DB_CONNECT_RETRIES", "2")
os.environ.setdefault("DB_CONNECT_RETRY_DELAY", "0")
os.environ.setdefault("APP_ENV", "test")

import pytest
from fastapi.testclient import TestClient

from app.data.database import Base, TransactionProvider, get_provider, make_engine
from app.data.models import CartItemModel, ProductModel, UserModel
from app.main import create_app


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id, order_id):
        self.sent.append((user_id, order_id))
        return True


@pytest.fixture
def provider(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'shop.db'}")
    Base.metadata.create_all(bind=engine)
    yield TransactionProvider(engine, retries=1, retry_delay=0)
    engine.dispose()


@pytest.fixture
def catalog(provider):
    """Two users and three products with known prices."""
    with provider.transaction() as db:
        db.add_all(
            [
                UserModel(id=1, first_name="Ada", last_name="Nowak", email="ada@example.com", password_hash="x"),
                UserModel(id=2, first_name="Jan", last_name="Kowal", email="jan@example.com", password_hash="x"),
            ]
        )
        db.add_all(
            [
                ProductModel(id=1, name="Tee", category="Apparel", price=Decimal("10.00"), image="/img/tee.jpg"),
                ProductModel(id=2, name="Mug", category="Home", price=Decimal("5.00"), image="/img/mug.jpg"),
                ProductModel(id=3, name="Lamp", category="Home", price=Decimal("99.99"), image=None,
                             description="Desk lamp"),
            ]
        )
    return provider


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(catalog):
    api = create_app()
    api.dependency_overrides[get_provider] = lambda: catalog
    return TestClient(api)


@pytest.fixture
def cart_rows(catalog):
    """Current cart of a user as {product_id: quantity}."""

    def _rows(user_id):
        with catalog.session() as db:
            return {
                item.product_id: item.quantity
                for item in db.query(CartItemModel).filter(CartItemModel.user_id == user_id)
            }

    return _rows
