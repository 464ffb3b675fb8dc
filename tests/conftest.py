import os

# must be set before foodmarket.utils.settings is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import foodmarket.data.models  # noqa: F401
from foodmarket.api import create_app
from foodmarket.api.deps import get_ai_client, get_lock_service
from foodmarket.data.database import Base, get_db, make_engine
from foodmarket.data.models import (
    CartItemModel,
    ItemModel,
    OrderLineModel,
    OrderModel,
    OrderStatus,
    UserModel,
)
from foodmarket.data.models.user import DEFAULT_WORKOUT_SPLIT
from foodmarket.services.ai_client import WorkoutPlanClient
from foodmarket.services.lock_service import LockService


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'market.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def lock_service():
    return LockService(client=fakeredis.FakeRedis(decode_responses=True), max_wait=0.2)


@pytest.fixture
def ai_client():
    return MagicMock(spec=WorkoutPlanClient)


@pytest.fixture
def app(session_factory, lock_service, ai_client):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_ai_client] = lambda: ai_client
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make(email="buyer@example.com", username="buyer", location="Kochi"):
        user = UserModel(
            email=email,
            username=username,
            password_hash="not-a-real-hash",
            location=location,
            workout_split=dict(DEFAULT_WORKOUT_SPLIT),
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_item(db):
    def _make(name="Paneer", price="10.50", protein="18g", seller=None, location="Kochi", quantity=5):
        item = ItemModel(
            name=name,
            price=Decimal(price),
            protein=protein,
            seller=seller,
            location=location,
            quantity=quantity,
        )
        db.add(item)
        db.commit()
        return item

    return _make


@pytest.fixture
def fill_cart(db):
    def _fill(user, item, quantity):
        db.add(CartItemModel(user_id=user.id, item_id=item.id, quantity=quantity))
        db.commit()

    return _fill


@pytest.fixture
def make_order(db):
    """Insert an order directly, bypassing checkout."""

    def _make(user, lines, status=OrderStatus.PENDING, created_at=None):
        order = OrderModel(
            user_id=user.id,
            status=status,
            delivery_method="Pickup",
            total=sum((item.price * qty for item, qty in lines), Decimal("0.00")),
            created_at=created_at or datetime.now(timezone.utc),
            lines=[
                OrderLineModel(item_id=item.id, quantity=qty, price_at_purchase=item.price)
                for item, qty in lines
            ],
        )
        db.add(order)
        db.commit()
        return order

    return _make


@pytest.fixture
def stock_of(db):
    """Current stock straight from the database, not the session cache."""

    def _stock(item_id):
        db.expire_all()
        return db.get(ItemModel, item_id).quantity

    return _stock
