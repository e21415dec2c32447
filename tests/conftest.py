"""Pytest fixtures for testing"""

from datetime import datetime, timezone
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from parish_hub.api.dependencies import get_store
from parish_hub.api.main import create_app
from parish_hub.infrastructure.database.models import Base
from parish_hub.infrastructure.database.session import get_db
from parish_hub.infrastructure.demo.seed import build_demo_store
from parish_hub.infrastructure.demo.store import InMemoryStore
from parish_hub.services.attendance_service import AttendanceService

# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Wednesday; the seeded "this Sunday" service falls on 2025-06-08
FIXED_NOW = datetime(2025, 6, 11, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store() -> InMemoryStore:
    """Fresh demo store per test"""
    return build_demo_store()


@pytest.fixture
def fixed_store() -> InMemoryStore:
    """Demo store seeded around FIXED_NOW"""
    return build_demo_store(now=FIXED_NOW)


@pytest.fixture
def service(fixed_store: InMemoryStore) -> AttendanceService:
    """Attendance service with a frozen clock"""
    return AttendanceService(fixed_store, clock=lambda: FIXED_NOW)


@pytest.fixture
def client(db: Session, store: InMemoryStore) -> TestClient:
    """Create FastAPI test client with test database and an isolated demo store"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_store] = lambda: store
    return TestClient(app)
