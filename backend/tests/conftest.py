"""
Pytest configuration and shared fixtures.

This module provides:
- Environment variable setup for tests
- An in-memory database per test
- Application, HTTP client and admin fixtures
- A controllable clock for rate limiter tests
"""

import os
import sys
from pathlib import Path

import pytest


# Set test environment variables BEFORE any imports
# This must happen first to ensure settings load with test values
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test_secret_key_at_least_32_characters_long_for_jwt"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"  # Minimum cost keeps the suite fast
os.environ["LOG_JSON"] = "false"
os.environ["LOGIN_RATE_LIMIT"] = "5"
os.environ["LOGIN_RATE_WINDOW_SECONDS"] = "60"

# Add backend directory to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402


ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"


class FakeClock:
    """Manually advanced time source for deterministic window tests."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limiter(clock):
    """Isolated limiter driven by the fake clock, sweeping disabled."""
    from app.services.rate_limiter import FixedWindowRateLimiter

    return FixedWindowRateLimiter(clock=clock, cleanup_probability=0.0)


@pytest.fixture
async def async_session():
    """
    Create an in-memory database session for testing.

    Yields:
        AsyncSession bound to a fresh schema
    """
    from app.core.database import get_async_engine
    from app.models.base import Base
    from app import models  # noqa: F401 - Import to register models

    # Same engine setup as production, foreign keys enforced
    engine = get_async_engine("sqlite+aiosqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture
async def test_admin(async_session):
    """Admin account matching the seeded defaults (admin / admin123)."""
    from app.services.content_seeder import seed_admin

    admin = await seed_admin(async_session, ADMIN_USERNAME, ADMIN_PASSWORD)
    await async_session.commit()
    return admin


@pytest.fixture
def app(async_session, rate_limiter):
    """
    Application wired to the test database and limiter.

    Returns:
        FastAPI app with overridden dependencies
    """
    from app.core.database import get_db
    from app.main import create_app

    application = create_app(rate_limiter=rate_limiter)

    async def override_get_db():
        yield async_session

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    """Async HTTP client talking to the app in-process."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as http_client:
        yield http_client


@pytest.fixture
async def admin_client(client, test_admin):
    """Client holding a valid admin session cookie."""
    response = await client.post(
        "/api/admin/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return client
