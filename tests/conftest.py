"""Pytest configuration and fixtures."""

import os

# Cheap hashes and no on-disk database for the whole test run.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import app.models  # noqa: E402, F401
from app.database import Base, get_db  # noqa: E402
from app.services.auth import AuthService  # noqa: E402


class FrozenClock:
    """Stand-in for ``app.clock.now_ms`` that only moves when told to."""

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, *, ms: int = 0, seconds: int = 0, minutes: int = 0, hours: int = 0, days: int = 0) -> None:
        self.now += ms + 1000 * (seconds + 60 * (minutes + 60 * (hours + 24 * days)))


class RecordingDelivery:
    """Reset token delivery that keeps what it was handed."""

    def __init__(self) -> None:
        self.delivered: list[tuple[int, str]] = []

    def deliver(self, user, token: str) -> None:
        self.delivered.append((user.id, token))


@pytest.fixture(name="clock")
def clock_fixture(monkeypatch: pytest.MonkeyPatch) -> FrozenClock:
    """Freeze time; advance it with ``clock.advance(hours=1)``."""
    frozen = FrozenClock()
    monkeypatch.setattr("app.clock.now_ms", frozen)
    return frozen


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="delivery")
def delivery_fixture() -> RecordingDelivery:
    return RecordingDelivery()


@pytest.fixture(name="auth_service")
def auth_service_fixture(delivery: RecordingDelivery) -> AuthService:
    return AuthService(delivery=delivery)


@pytest.fixture(name="client")
def client_fixture(db_session: Session, auth_service: AuthService, monkeypatch: pytest.MonkeyPatch):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from app.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    monkeypatch.setattr("app.services.auth._auth_service", auth_service)
    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session, auth_service: AuthService):
    """Register a test user and return its details with a session token."""
    result = auth_service.register(db_session, "Test User", "test@example.com", "password123")
    return {
        "user_id": result.user_id,
        "email": result.user.email,
        "name": result.user.name,
        "password": "password123",
        "token": result.session_token,
    }
