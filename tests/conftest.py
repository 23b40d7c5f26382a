# tests/conftest.py
"""
Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite database. The app's ``get_db``
dependency is overridden so HTTP tests and service tests see the same data.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["MATCH_NAME_SIMILARITY"] = "lexical"

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from praxis.auth.service import create_token
from praxis.core.database import Base, enable_sqlite_foreign_keys, get_db
from praxis.goals.models import Domain
from praxis.goals.schemas import GoalNodeCreate
from praxis.goals.service import create_node
from praxis.users.schemas import UserUpsert
from praxis.users.service import upsert_profile

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """A session on a freshly created schema."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """A FastAPI test client wired to the test database."""

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory creating a user profile; returns its id."""

    def _make(name: str = "Alice", email: str = None) -> uuid.UUID:
        user_id = uuid.uuid4()
        upsert_profile(db, user_id, UserUpsert(name=name, email=email))
        return user_id

    return _make


@pytest.fixture
def make_goal(db):
    """Factory creating a goal through the store."""

    def _make(user_id, name="Goal", domain=Domain.CAREER, parent=None, weight=1.0):
        node_in = GoalNodeCreate(
            name=name,
            domain=domain,
            parent_id=parent.id if parent is not None else None,
            weight=weight,
        )
        return create_node(db, node_in, user_id)

    return _make


def auth_headers(user_id) -> dict:
    return {"Authorization": f"Bearer {create_token(user_id)}"}


@pytest.fixture
def headers_for():
    return auth_headers
