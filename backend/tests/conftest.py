"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789abcdef"
os.environ["CORS_ORIGINS"] = "http://localhost:5173"
os.environ["ADMIN_EMAIL"] = "admin@test.com"
os.environ["ADMIN_PASSWORD"] = "TestAdmin123!"
os.environ["ENVIRONMENT"] = "test"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="studysphere-uploads-")

from authentication.auth import create_access_token  # noqa: E402
import models.schemas as schemas  # noqa: E402
import repositories.db_models as db_models  # noqa: E402
from models.config import settings  # noqa: E402
from repositories.database import get_store  # noqa: E402
from repositories.memory_store import MemStorage  # noqa: E402
from services.user_service import UserService  # noqa: E402


@pytest.fixture(scope="function")
def store() -> MemStorage:
    """Create a fresh, empty store for each test."""
    return MemStorage()


@pytest.fixture(scope="function")
def client(store):
    """Create a test client with overridden store dependency."""
    from main import app

    def override_get_store():
        return store

    app.dependency_overrides[get_store] = override_get_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch) -> Path:
    """Point uploads at a per-test directory."""
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


def make_user(
    store: MemStorage,
    username: str,
    password: str = "password123",
    role: db_models.UserRole = db_models.UserRole.REGULAR,
    **extra,
) -> db_models.User:
    """Register a user through the service layer."""
    return UserService.register_user(
        store,
        schemas.UserCreate(
            username=username,
            email=f"{username}@example.com",
            password=password,
            **extra,
        ),
        role=role,
    )


def auth_headers_for(user: db_models.User) -> dict:
    token = create_access_token(data={"sub": user.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_factory(store):
    """Factory fixture to register users in the test store."""

    def _create_user(username: str, **extra) -> db_models.User:
        return make_user(store, username, **extra)

    return _create_user


@pytest.fixture
def headers_for():
    """Factory fixture building bearer headers for any user."""
    return auth_headers_for


@pytest.fixture
def admin_user(store) -> db_models.User:
    """Create the first admin."""
    return make_user(
        store, "adminuser", "adminpassword123", role=db_models.UserRole.ADMIN
    )


@pytest.fixture
def test_user(store) -> db_models.User:
    """Create a regular user."""
    return make_user(
        store,
        "testuser",
        "testpassword123",
        display_name="Test User",
        department="Computer Science",
        institution="StudySphere University",
        year_of_study=2,
    )


@pytest.fixture
def other_user(store) -> db_models.User:
    """Create a second regular user."""
    return make_user(
        store,
        "otheruser",
        "otherpassword123",
        display_name="Other User",
        department="Computer Science",
    )


@pytest.fixture
def auth_headers(test_user) -> dict:
    """Get authentication headers for test user."""
    return auth_headers_for(test_user)


@pytest.fixture
def other_auth_headers(other_user) -> dict:
    return auth_headers_for(other_user)


@pytest.fixture
def admin_auth_headers(admin_user) -> dict:
    """Get authentication headers for the admin user."""
    return auth_headers_for(admin_user)
