"""
Pytest configuration and fixtures.
Provides test app client and async DB session replacement.
"""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.main import app
from app.db.base import Base
from app.db.session import get_db


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def as_naive_utc(value: datetime) -> datetime:
    """Normalize a timestamp read back from SQLite or JSON to naive UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@pytest.fixture(scope="function")
async def test_session_maker():
    """
    Create an in-memory database and a sessionmaker bound to it.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture(scope="function")
async def test_db_session(test_session_maker):
    """
    Create a test database session.
    Uses in-memory SQLite for fast tests.
    """
    async with test_session_maker() as session:
        yield session


@pytest.fixture(scope="function")
async def test_client(test_session_maker):
    """
    Create a test HTTP client whose requests each get their own session
    on the test database.
    """
    async def override_get_db():
        async with test_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


def contact_payload(**overrides) -> dict:
    """A valid create body in wire (camelCase) format."""
    payload = {
        "firstName": "Ann",
        "email": "ann@x.com",
    }
    payload.update(overrides)
    return payload
