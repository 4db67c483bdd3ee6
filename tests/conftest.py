"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports, and provides
the store settings the application refuses to start without.
"""

import os
import sys
from pathlib import Path

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# In-memory SQLite stands in for the managed store
os.environ.setdefault("STORE_URL", "sqlite://")
os.environ.setdefault("STORE_KEY", "test-store-key")
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from domain.models import init_database
from main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(
        store_url="sqlite://",
        store_key="test-store-key",
        environment="testing",
        _env_file=None,
    )


@pytest.fixture
def app(settings):
    """Application with a fresh in-memory database and its schema"""
    application = create_app(settings)
    init_database(application.state.engine)
    yield application
    application.state.engine.dispose()


@pytest.fixture
def db_session(app):
    """Session on the same database the application serves from"""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(app):
    return TestClient(app)
