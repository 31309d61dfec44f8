"""
Test configuration and fixtures for task tracker tests.

Provides:
- Test database with SQLite in-memory for speed
- FastAPI test client with database dependency override
- Authentication helpers (JWT token generation)
- Common fixtures for users, projects, and tasks
"""

import os
import sys
import logging
from datetime import datetime, timedelta
from typing import Generator, Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# The app is built at import time; point it at a throwaway store first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from database import Base, get_db
from main import app
import models
from auth.security import hash_password, create_access_token

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

# SQLite in-memory database for fast testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """
    Create a fresh in-memory SQLite database for each test.

    This ensures test isolation and fast execution.
    """
    engine = create_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(test_db: Session) -> TestClient:
    """
    Create FastAPI test client with database dependency override.
    """
    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_user(db: Session, name: str, email: str, password: str = "secret123") -> models.User:
    user = models.User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role="user",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def owner(test_db: Session) -> models.User:
    """The user whose resources most tests exercise."""
    user = make_user(test_db, "Owner User", "owner@test.com")
    logger.info(f"Created owner user with ID: {user.id}")
    return user


@pytest.fixture(scope="function")
def other_user(test_db: Session) -> models.User:
    """A second user for cross-ownership scenarios."""
    user = make_user(test_db, "Other User", "other@test.com")
    logger.info(f"Created other user with ID: {user.id}")
    return user


def create_auth_token(user: models.User, expires_delta: timedelta = None) -> str:
    """
    Helper to create JWT access token for a user.

    Args:
        user: User to create token for
        expires_delta: Optional expiration time override

    Returns:
        JWT access token string
    """
    token_data = {
        "sub": str(user.id),
        "role": user.role,
        "email": user.email
    }
    return create_access_token(token_data, app.state.context.settings, expires_delta)


def auth_header(user: models.User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_auth_token(user)}"}


@pytest.fixture(scope="function")
def owner_headers(owner: models.User) -> Dict[str, str]:
    return auth_header(owner)


@pytest.fixture(scope="function")
def other_headers(other_user: models.User) -> Dict[str, str]:
    return auth_header(other_user)


def make_project(db: Session, owner: models.User, title: str = "Test Project", **kwargs) -> models.Project:
    project = models.Project(
        title=title,
        description=kwargs.pop("description", "A project for testing"),
        owner_id=owner.id,
        **kwargs
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


def make_task(
    db: Session,
    project: models.Project,
    title: str,
    due_date: datetime,
    owner: models.User = None,
    **kwargs
) -> models.Task:
    task = models.Task(
        title=title,
        description=kwargs.pop("description", f"{title} description"),
        due_date=due_date,
        project_id=project.id,
        owner_id=(owner.id if owner is not None else project.owner_id),
        **kwargs
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


@pytest.fixture(scope="function")
def project(test_db: Session, owner: models.User) -> models.Project:
    return make_project(test_db, owner, "Owner Project")


@pytest.fixture(scope="function")
def other_project(test_db: Session, other_user: models.User) -> models.Project:
    return make_project(test_db, other_user, "Other Project")
