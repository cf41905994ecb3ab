"""
Conduit Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── db_engine:       in-memory SQLite with every table created
    ├── db_session:      a real AsyncSession on that engine
    ├── test_client:     HTTPX AsyncClient whose requests use db_engine
    ├── register:        helper that registers a user through the API
    └── create_article:  helper that publishes an article through the API

Every API test gets its own empty database, so tests never see each
other's rows.
"""

import os

# Override settings for testing BEFORE any conduit imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"  # bcrypt minimum, keeps hashing fast
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any, AsyncGenerator, Dict, List, Optional  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

import conduit.models  # noqa: E402,F401
from conduit.database import Base, get_db_session  # noqa: E402


def auth_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Token {token}"}


# ══════════════════════════════════════════════════════════════════════════
# Mocked Session (service unit tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_login(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
            await user_service.login(mock_db_session, data)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.execute.return_value = MagicMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Real Database (API tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite shared by every session of one test.

    StaticPool keeps a single connection alive; without it each new
    connection would open a fresh, empty :memory: database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the app over ASGITransport.

    get_db_session is overridden with the same commit/rollback contract,
    bound to the per-test engine.
    """
    from conduit.main import app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# ══════════════════════════════════════════════════════════════════════════
# API Helpers
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def auth_headers():
    """Builds the `Authorization: Token <jwt>` header for a token."""
    return auth_header


@pytest.fixture
def register(test_client):
    """
    Registers a user and returns the `user` payload (including token).

    Usage:
        alice = await register("alice")
        headers = auth_headers(alice["token"])
    """
    async def _register(
        username: str,
        email: Optional[str] = None,
        password: str = "password123",
    ) -> Dict[str, Any]:
        response = await test_client.post(
            "/api/users/register",
            json={
                "user": {
                    "username": username,
                    "email": email or f"{username}@example.com",
                    "password": password,
                }
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["user"]

    return _register


@pytest.fixture
def create_article(test_client):
    """Publishes an article as the token's owner and returns the `article` payload."""
    async def _create(
        token: str,
        title: str = "How to train your dragon",
        description: str = "Ever wonder how?",
        body: str = "You have to believe",
        tag_list: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        article: Dict[str, Any] = {
            "title": title,
            "description": description,
            "body": body,
        }
        if tag_list is not None:
            article["tagList"] = tag_list
        response = await test_client.post(
            "/api/articles",
            json={"article": article},
            headers=auth_header(token),
        )
        assert response.status_code == 201, response.text
        return response.json()["article"]

    return _create
