"""Pytest configuration and fixtures."""

import asyncio
import os

# Settings are cached on first import, so the test environment is set up front
os.environ["DATABASE_URL"] = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from src.database import Base, engine, init_db  # noqa: E402
from src.main import app  # noqa: E402


class AuthHeaders(dict):
    """Dict subclass that also stores the authenticated user's id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


async def _clear_tables() -> None:
    async with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(table.delete())


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    asyncio.run(init_db())
    yield
    # Don't drop the database - each test cleans up after itself


@pytest.fixture(scope="function", autouse=True)
def clean_database():
    """Remove every row written by the test."""
    yield
    asyncio.run(_clear_tables())


@pytest.fixture(scope="function")
def client():
    """Create a test client running the app lifespan."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Return a helper that registers a user and returns the response data."""

    def _register(email: str, password: str = "testpass123", name: str = "Test User") -> dict:
        response = client.post(
            "/auth/register",
            json={"nombre": name, "email": email, "contrasena": password},
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register


@pytest.fixture
def auth_headers(client, register_user):
    """Create a user, log in, and return auth headers with user info."""
    user = register_user("test@example.com")
    response = client.post(
        "/auth/login",
        json={"email": "test@example.com", "contrasena": "testpass123"},
    )
    assert response.status_code == 200
    token = response.json()["token"]

    return AuthHeaders(
        {"Authorization": f"Bearer {token}"},
        user_id=user["id"],
        email=user["email"],
    )
