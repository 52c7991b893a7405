import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskflow.core import security
from taskflow.db import models
from taskflow.db.session import get_db
from taskflow.main import app


@pytest.fixture(name="session")
def session_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    models.Base.metadata.create_all(engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    with TestingSession() as session:
        yield session
    engine.dispose()


@pytest.fixture
def client(session):
    """Create a test client that shares the test session."""
    app.dependency_overrides[get_db] = lambda: session

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_user(session, email="user@example.com", role="user", full_name="Test User", password="secret123"):
    user = models.User(
        email=email,
        full_name=full_name,
        role=role,
        hashed_password=security.get_password_hash(password),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_header(user):
    return {"Authorization": f"Bearer {security.create_access_token(user.id, user.role)}"}


@pytest.fixture
def user(session):
    return make_user(session)


@pytest.fixture
def other_user(session):
    return make_user(session, email="other@example.com", full_name="Other User")


@pytest.fixture
def admin(session):
    return make_user(session, email="admin@example.com", role="admin", full_name="Admin User")


@pytest.fixture
def user_headers(user):
    return auth_header(user)


@pytest.fixture
def admin_headers(admin):
    return auth_header(admin)
