"""Integration test fixtures.

Runs the real application (routes, orchestrator, JWT codec, Argon2,
SQLAlchemy repository) against an in-memory SQLite database and the
in-memory session cache.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from authcore.infrastructure.config.settings import get_settings
from authcore.infrastructure.persistence.database import Base
from authcore.main import create_app
from authcore.presentation.dependencies import get_session_factory

# Test database URL (SQLite in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_ENVIRONMENT = {
    "ACCESS_TOKEN_SECRET": "integration-access-secret-0123456789abcdef",
    "REFRESH_TOKEN_SECRET": "integration-refresh-secret-0123456789abcdef",
    "CACHE_BACKEND": "memory",
    "ENVIRONMENT": "test",
    "LOGIN_RATE_LIMIT_ATTEMPTS": "5",
    "LOGIN_RATE_LIMIT_WINDOW_SECONDS": "900",
}


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine]:
    """Create a test database engine using SQLite in-memory."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_factory(test_engine: AsyncEngine):
    """Create a test session factory."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def app(monkeypatch) -> Generator[FastAPI]:
    """Build the application with test settings from the environment."""
    for name, value in TEST_ENVIRONMENT.items():
        monkeypatch.setenv(name, value)
    get_settings.cache_clear()

    yield create_app()

    get_settings.cache_clear()


@pytest.fixture
def client(app: FastAPI, test_session_factory) -> Generator[TestClient]:
    """
    Create a FastAPI test client with test database.

    Entering the client runs the lifespan, which builds the session cache.
    """
    app.dependency_overrides[get_session_factory] = lambda: test_session_factory

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
