"""Pytest configuration and shared fixtures.

Every test that touches the database gets its own schema: a fresh SQLite file
under ``tmp_path`` unless ``TEST_DATABASE_URL`` points at a disposable server
database, in which case the tables are dropped and recreated per test.
"""

from __future__ import annotations

import os

# Settings are validated at import time, so the environment must be complete
# before anything under ``app`` is imported.
os.environ.setdefault("POSTGRES_USER", "newsroom")
os.environ.setdefault("POSTGRES_PASSWORD", "newsroom")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_PORT", "5432")
os.environ.setdefault("POSTGRES_DB", "newsroom")
os.environ.setdefault("JWT_SECRET_KEY", "Test-Only-Secret-Key-For-Newsroom-Api-2024!")
os.environ.setdefault("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", "60")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from collections.abc import AsyncIterator  # noqa: E402
from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.core import config  # noqa: E402
from app.db import models  # noqa: E402, F401  (registers tables on Base.metadata)
from app.db.base import Base  # noqa: E402
from app.db.session import dispose_engine, get_engine, get_session_maker  # noqa: E402
from app.mail.client import LoggingMailClient  # noqa: E402
from app.main import create_app  # noqa: E402
from tests.factories import (  # noqa: E402
    AuthenticatedUser,
    create_category,
    promote_to_admin,
    register_and_login,
)


def _get_test_database_url(tmp_path: Path) -> str:
    """Resolve the test database URL from env, or a throwaway SQLite file."""
    env_url = os.getenv("TEST_DATABASE_URL")
    if env_url:
        return env_url
    return f"sqlite+aiosqlite:///{tmp_path / 'newsroom-test.db'}"


@pytest_asyncio.fixture(scope="function")
async def database(tmp_path: Path) -> AsyncIterator[str]:
    """Points the application at an empty database with all tables created."""
    config.settings.environment = "test"
    config.settings.database_url = _get_test_database_url(tmp_path)
    await dispose_engine()

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield str(config.settings.database_url)

    await dispose_engine()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: str) -> AsyncIterator[AsyncSession]:
    """A session on the test database.

    Keep it away from concurrent HTTP calls in the same test: SQLite allows a
    single writer, so an open transaction here would block the request.
    """
    async with get_session_maker()() as session:
        yield session


@pytest.fixture(scope="function")
def mail_client() -> LoggingMailClient:
    """Captures one-time codes instead of sending them."""
    return LoggingMailClient()


@pytest_asyncio.fixture(scope="function")
async def async_app(database: str, mail_client: LoggingMailClient) -> FastAPI:
    """Creates a FastAPI app bound to the per-test database."""
    return create_app(mail_client=mail_client)


@pytest_asyncio.fixture(scope="function")
async def async_http_client(async_app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Creates an async http client."""
    transport = ASGITransport(app=async_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture(scope="function")
async def author(async_http_client: AsyncClient) -> AuthenticatedUser:
    """A registered, logged in regular user."""
    return await register_and_login(async_http_client, "author@example.com", name="Ada Author")


@pytest_asyncio.fixture(scope="function")
async def other_user(async_http_client: AsyncClient) -> AuthenticatedUser:
    """A second regular user who owns nothing the author created."""
    return await register_and_login(async_http_client, "reader@example.com", name="Rex Reader")


@pytest_asyncio.fixture(scope="function")
async def admin(async_http_client: AsyncClient) -> AuthenticatedUser:
    """A logged in user with the admin role."""
    user = await register_and_login(async_http_client, "admin@example.com", name="Ann Admin")
    await promote_to_admin(user.id)
    return user


@pytest_asyncio.fixture(scope="function")
async def category(async_http_client: AsyncClient, author: AuthenticatedUser) -> dict[str, object]:
    """The "tech" category, created by ``author``."""
    return await create_category(async_http_client, author, name="Tech")


# Synchronous fixtures (function-scoped, for tests that don't need database access)


@pytest.fixture(scope="function")
def app() -> FastAPI:
    """Creates a FastAPI app for synchronous tests that never reach the database."""
    config.settings.environment = "test"
    return create_app(mail_client=LoggingMailClient())


@pytest.fixture(scope="function")
def http_client(app: FastAPI) -> TestClient:
    """Creates a synchronous http client."""
    return TestClient(app)
