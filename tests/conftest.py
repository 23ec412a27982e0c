"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all DoseTrack tests.
Fixtures include database sessions, a test client with a pinned clock,
and sample users, categories and medications.
"""

import os
import sys
from datetime import datetime, timedelta
from typing import Generator, Dict, Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session


# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Keep the app's own engine off the filesystem
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from database import Base, build_engine, get_db
from models import User, Category, Medication, DoseLog, DoseStatus
from api.deps import get_now
from app import app


# Fixed clock used by every time-sensitive test: Monday 2026-03-02 12:00
FIXED_NOW = datetime(2026, 3, 2, 12, 0, 0)


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = build_engine("sqlite:///:memory:")

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a test database session"""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def now() -> datetime:
    """The pinned current time"""
    return FIXED_NOW


@pytest.fixture(scope="function")
def client(db_session: Session, now: datetime) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database and clock overrides"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: now

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def sample_medication_data() -> Dict[str, Any]:
    """Sample medication data for creating test medications"""
    return {
        "name": "Metformin",
        "dose": "500mg",
        "frequency": 2,
        "times": ["08:00", "20:00"],
        "start_date": FIXED_NOW.date() - timedelta(days=7),
        "end_date": None,
    }


@pytest.fixture
def test_user(db_session: Session) -> User:
    """Create and return a test user"""
    user = User(email="jane.doe@example.com", name="Jane Doe", streak=0)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_user(db_session: Session) -> User:
    """A second user, for ownership checks"""
    user = User(email="someone.else@example.com", name="Someone Else", streak=0)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user: User) -> Dict[str, str]:
    """Identity header for the test user"""
    return {"X-User-Id": str(test_user.id)}


@pytest.fixture
def test_category(db_session: Session, test_user: User) -> Category:
    """Create and return a test category"""
    category = Category(user_id=test_user.id, name="Diabetes")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def test_medication(
    db_session: Session,
    test_user: User,
    test_category: Category,
    sample_medication_data: Dict
) -> Medication:
    """Create and return a test medication linked to the test user"""
    medication = Medication(
        user_id=test_user.id,
        category_id=test_category.id,
        **sample_medication_data
    )
    db_session.add(medication)
    db_session.commit()
    db_session.refresh(medication)
    return medication


@pytest.fixture
def make_log(db_session: Session, test_user: User):
    """Factory for dose logs stored at a given creation time"""

    def _make(
        medication: Medication,
        scheduled_time: str,
        created_at: datetime,
        status: DoseStatus = DoseStatus.TAKEN,
        was_late: bool = False
    ) -> DoseLog:
        log = DoseLog(
            medication_id=medication.id,
            user_id=test_user.id,
            scheduled_time=scheduled_time,
            taken_at=created_at,
            created_at=created_at,
            status=status,
            was_late=was_late
        )
        db_session.add(log)
        db_session.commit()
        db_session.refresh(log)
        return log

    return _make


# ==================== MARKERS ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "api: mark test as an API test")
    config.addinivalue_line("markers", "database: mark test as requiring database")
