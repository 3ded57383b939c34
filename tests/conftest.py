"""Pytest fixtures and configuration for lifescore tests."""

import pytest
from datetime import datetime
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
import uuid

from lifescore.database.database import Base
from lifescore.database.pillar_repository import PillarRepository
from lifescore.database.task_repository import TaskRepository
from lifescore.models.task import Task, Pillar, CompletionType, Importance, FlexibilityRule, Frequency


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session(test_user_id):
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    Also creates a test user in the database.
    """
    from lifescore.database import models  # noqa: F401
    from lifescore.database.models import UserDB

    # Create engine with StaticPool for in-memory database
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    # Enable SQLite foreign keys
    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    # Create test user (required for foreign key constraints)
    now = datetime.utcnow()
    session.add(UserDB(
        id=test_user_id,
        email="test@example.com",
        name="Test User",
        created_at=now,
        updated_at=now,
    ))
    session.commit()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_user_id():
    """Test user ID for multi-user testing."""
    return "test-user-123"


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def pillar_repository(db_session: Session):
    """Create a PillarRepository instance for testing."""
    return PillarRepository(db_session)


@pytest.fixture
def sample_task_base(test_user_id):
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": str(uuid.uuid4()),
        "user_id": test_user_id,
        "name": "Test Task",
        "pillar_id": None,
        "completion_type": CompletionType.CHECKBOX,
        "target": None,
        "importance": Importance.MEDIUM,
        "base_points": 10,
        "flexibility_rule": FlexibilityRule.MUST_TODAY,
        "limit_value": None,
        "frequency": Frequency.DAILY,
        "custom_days": None,
        "is_weekend_task": False,
        "is_active": True,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def make_task(sample_task_base):
    """Factory for tasks with overridden attributes and a fresh id."""
    def _make(**overrides):
        return Task(**{**sample_task_base, "id": str(uuid.uuid4()), **overrides})
    return _make


@pytest.fixture
def health_pillar(test_user_id):
    """A pillar with the default weight."""
    return Pillar(id=str(uuid.uuid4()), user_id=test_user_id, name="Health", emoji="💪", color="#22C55E", weight=10)


@pytest.fixture
def work_pillar(test_user_id):
    """A pillar weighted twice as much as health_pillar."""
    return Pillar(id=str(uuid.uuid4()), user_id=test_user_id, name="Work", emoji="💼", color="#3B82F6", weight=20)


@pytest.fixture
def test_user(test_user_id):
    """Create a test user object."""
    from lifescore.models.user import User
    now = datetime.utcnow()
    return User(
        id=test_user_id,
        email="test@example.com",
        name="Test User",
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def test_client(db_session: Session, test_user):
    """Create a FastAPI test client with overridden database dependency and authentication."""
    from lifescore.api.app import app
    from lifescore.database.database import get_db
    from lifescore.auth.dependencies import get_current_user

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    # Override authentication to return test user
    def override_get_current_user():
        return test_user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    # Not used as a context manager: the app lifespan would create tables in
    # the configured DATABASE_URL.
    client = TestClient(app)
    yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
