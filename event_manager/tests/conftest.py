import os

os.environ.setdefault("ORGANISER_PASSWORD", "organiser-secret")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402

import fakeredis  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import Engine, StaticPool, create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.orm.session import Session  # noqa: E402

from event_manager.core.redis_client import get_redis  # noqa: E402
from event_manager.database.db import Base, get_db  # noqa: E402
from event_manager.main import app  # noqa: E402
from event_manager.models.events import Event, EventStatus  # noqa: E402

ORGANISER_PASSWORD = os.environ["ORGANISER_PASSWORD"]

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine: Engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Give every test an empty ledger."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


# Override the database dependency
def override_get_db():
    db: Session = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def session_factory():
    """Session factory bound to the test engine, for code that opens its own sessions."""
    return TestingSessionLocal


@pytest.fixture
def organiser_password() -> str:
    return ORGANISER_PASSWORD


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def redis_client(fake_redis):
    """Route every Redis dependency of the app to the fake server."""
    app.dependency_overrides[get_redis] = lambda: fake_redis
    yield fake_redis
    app.dependency_overrides.pop(get_redis, None)


@pytest.fixture
def client(redis_client):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def organiser_client(client):
    response = client.post("/organiser/login", json={"password": ORGANISER_PASSWORD})
    assert response.status_code == 200, response.text
    return client


def future_date(days: int = 30) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


@pytest.fixture
def make_event(db_session: Session):
    """Insert an event straight into the ledger, published by default."""

    def _make_event(**overrides) -> Event:
        values = {
            "title": "Spring Concert",
            "description": "An evening of chamber music",
            "event_date": future_date(),
            "full_price_tickets": 2,
            "full_price_cost": Decimal("10.00"),
            "concession_tickets": 3,
            "concession_cost": Decimal("5.00"),
            "status": EventStatus.PUBLISHED.value,
        }
        values.update(overrides)
        event = Event(**values)
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make_event
