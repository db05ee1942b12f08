"""
Pytest fixtures for testing
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.auth import create_access_token, hash_password
from app.infrastructure.db.session import Base, build_engine, get_db
from app.infrastructure.db.models import User


@pytest.fixture
def db_engine():
    """Create in-memory SQLite engine for tests (one connection shared across threads)."""
    engine = build_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def _make_user(db_session, email: str, password: str = "secret123") -> User:
    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name="Test",
        last_name="User",
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def user(db_session) -> User:
    return _make_user(db_session, "alice@example.com")


@pytest.fixture
def other_user(db_session) -> User:
    return _make_user(db_session, "bob@example.com")


@pytest.fixture
def client(db_session):
    """Test client для FastAPI, get_db подменён на тестовую сессию"""
    from app.main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest.fixture
def alice_headers(user) -> dict:
    return auth_headers(user)


@pytest.fixture
def bob_headers(other_user) -> dict:
    return auth_headers(other_user)
