import os

# Must be set before app.core.config is imported anywhere.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.pop("DEFAULT_ADMIN_EMAIL", None)
os.environ.pop("DEFAULT_ADMIN_PASSWORD", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa
from app.core import security
from app.core.security import create_access_token
from app.db.base import Base
from app.db.deps import get_db
from app.models.enums import Role
from app.models.user import User
from app.repositories import user_repository

# Test database (in-memory SQLite)
TEST_DATABASE_URL = "sqlite://"

# Cheap bcrypt so the auth tests stay fast
security.pwd_context.update(bcrypt__rounds=4)
PASSWORD = "password"
PASSWORD_HASH = security.get_password_hash(PASSWORD)


@pytest.fixture(scope="function")
def session_factory():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield factory
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a test database session."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_user(db_session):
    """Factory persisting users through the store; fields can be overridden."""
    counter = {"n": 0}

    def _make(**overrides) -> User:
        counter["n"] += 1
        n = counter["n"]
        fields = dict(
            student_id=f"STU-2023-{1000 + n}",
            first_name="Test",
            last_name=f"Student{n}",
            email=f"student{n}@example.edu",
            password=PASSWORD_HASH,
            department="Computer Science",
            program="BSc Computer Science",
            roles={Role.STUDENT},
        )
        fields.update(overrides)
        return user_repository.create(db_session, User(**fields))

    return _make


@pytest.fixture
def student(make_user):
    return make_user(email="student@example.com", student_id="STU-2023-1234")


@pytest.fixture
def admin(make_user):
    return make_user(
        email="admin@example.com",
        student_id="ADMIN-0001",
        first_name="Admin",
        last_name="User",
        roles={Role.ADMIN},
    )


@pytest.fixture
def enqueued(monkeypatch):
    """Record status notifications instead of pushing them to Redis."""
    calls = []

    def fake_enqueue(request_id, old_status, new_status):
        calls.append((request_id, old_status, new_status))
        return f"job-{len(calls)}"

    monkeypatch.setattr(
        "app.services.id_request_service.enqueue_status_notification", fake_enqueue
    )
    return calls


@pytest.fixture
def client(db_session, enqueued):
    from app.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    token = create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    return auth_headers
