"""
Shared fixtures: in-memory database, seeded marketplace, API test client,
and a signed-in workflow client.
"""
from decimal import Decimal

import pytest
import respx
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from thriftfinder.client.api import ApiClient
from thriftfinder.client.identity import CurrentUser, IdentityResolver
from thriftfinder.core.database import Base, get_db
from thriftfinder.core.dependencies import validate_session
from thriftfinder.model import Item, Store, User

API_URL = "http://thriftfinder.test"

CUSTOMER_UID = "user1"
OWNER_UID = "user2"
OTHER_UID = "user3"
STORE_ID = "store1"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def seeded(db_session):
    """Customer user1, owner user2 with store1, and a small catalog."""
    db_session.add_all([
        User(uid=CUSTOMER_UID, email="shopper@example.com", display_name="Sipho", role="customer"),
        User(uid=OWNER_UID, email="owner@example.com", display_name="Thandi", role="storeOwner"),
        User(uid=OTHER_UID, email="other@example.com", display_name=None, role="customer"),
    ])
    db_session.add(Store(
        store_id=STORE_ID,
        store_name="Vintage Store",
        address="123 Main St, Cape Town",
        owner_id=OWNER_UID,
        hours={"Monday": {"open": True, "start": "09:00", "end": "17:00"}},
    ))
    db_session.add_all([
        Item(item_id="item1", store_id=STORE_ID, name="Denim Jacket", price=Decimal("120.00"),
             category="Outerwear", size="M", style="Vintage", images=[], status="Available"),
        Item(item_id="item2", store_id=STORE_ID, name="Leather Boots", price=Decimal("300.00"),
             category="Shoes", size="8", style="Classic", images=[], status="Reserved"),
    ])
    db_session.commit()
    return db_session


@pytest.fixture
def client(session_factory, seeded):
    """TestClient without lifespan, so Redis and the real database are never touched."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login_as():
    """Replace session validation with a fixed signed-in user."""

    def _login(uid: str, role: str = "customer"):
        app.dependency_overrides[validate_session] = lambda: {
            "uid": uid,
            "email": f"{uid}@example.com",
            "role": role,
        }

    return _login


@pytest.fixture
def identity():
    return IdentityResolver(CurrentUser(uid=CUSTOMER_UID, email="shopper@example.com"), token="test-token")


@pytest.fixture
async def api(identity):
    api = ApiClient(identity, base_url=API_URL)
    yield api
    await api.aclose()


@pytest.fixture
def mock_api():
    with respx.mock(base_url=API_URL, assert_all_called=False) as mock:
        yield mock
