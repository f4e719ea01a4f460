# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any app imports
# - In-memory SQLite database shared by the app and the tests
# - TestClients for the main and worker applications
# =============================================================================

import base64
import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("AUTH_SECRET", "test-auth-secret-0123456789")
os.environ.setdefault("QUEUE_DASHBOARD_USERNAME", "admin")
os.environ.setdefault("QUEUE_DASHBOARD_PASSWORD", "dashboard-password")
os.environ.setdefault("CORS_ORIGIN", "http://localhost:3000")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.pop("SENTRY_DSN", None)
os.environ.pop("IS_WORKER", None)

import pytest
from fastapi.testclient import TestClient

from app.config import Settings, settings
from app.main import create_app
from core.database import SessionLocal, engine
from core.entities import Base


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def make_settings():
    """Factory for Settings with test defaults; keyword overrides win."""
    def _make(**overrides) -> Settings:
        values = {
            "ENVIRONMENT": "test",
            "AUTH_SECRET": "test-auth-secret-0123456789",
            "QUEUE_DASHBOARD_PASSWORD": "dashboard-password",
            "DATABASE_URL": "sqlite://",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def db_session():
    """Fresh tables for each test, plus a session on the shared engine."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def app(db_session):
    """Main-mode application."""
    return create_app(settings, is_worker=False)


@pytest.fixture
def worker_app(db_session):
    """Worker-mode application."""
    return create_app(settings, is_worker=True)


@pytest.fixture
def client(app):
    # No `with`: the lifespan (Redis listener, table creation) is not started
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def worker_client(worker_app):
    return TestClient(worker_app, raise_server_exceptions=False)


@pytest.fixture
def dashboard_auth_header():
    """Valid Basic credentials for the queue dashboard."""
    token = base64.b64encode(
        f"{settings.QUEUE_DASHBOARD_USERNAME}:{settings.QUEUE_DASHBOARD_PASSWORD}".encode()
    ).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def sample_verification_payload():
    """Sample create request."""
    return {
        "identifier": "user@example.com",
        "value": "8f14e45fceea167a",
        "expires_in_seconds": 900,
    }
