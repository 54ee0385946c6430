"""
Notebook Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for service unit tests (no DB)
    ├── db_engine: in-memory SQLite engine with every table created
    ├── db_session: a real AsyncSession for seeding and assertions
    ├── test_client: HTTPX AsyncClient wired to the app, DB overridden
    ├── user: a seeded user "kody" with password "kodylovesyou"
    └── login: sets a valid session cookie for a user on test_client
"""

import os

# Must happen before anything imports notebook.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SESSION_SECRET"] = "test-session-secret-not-real"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import notebook.models  # noqa: F401
from notebook.config import settings
from notebook.database import Base, get_db_session
from notebook.models.user import Password, User
from notebook.services.auth_service import auth_service, get_password_hash

DEFAULT_PASSWORD = "kodylovesyou"


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_something(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = None
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


def scalar_result(value):
    """A mock db.execute() result whose scalar_one_or_none() returns `value`."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    return result


@pytest_asyncio.fixture
async def db_engine():
    # StaticPool: one shared connection, so the in-memory database survives
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    get_db_session is overridden to use the in-memory test database with
    the same commit/rollback behavior as production.
    """
    from notebook.main import app

    async def override_get_db_session():
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


async def create_user(
    db: AsyncSession,
    username: str = "kody",
    email: Optional[str] = None,
    name: Optional[str] = "Kody",
    password: Optional[str] = DEFAULT_PASSWORD,
) -> User:
    user = User(username=username, email=email or f"{username}@example.com", name=name)
    db.add(user)
    await db.flush()
    if password is not None:
        db.add(Password(user_id=user.id, hash=get_password_hash(password)))
    await db.commit()
    return user


@pytest_asyncio.fixture
async def user(db_session) -> User:
    return await create_user(db_session)


@pytest_asyncio.fixture
async def login(db_session, test_client):
    """
    Returns an async function that logs `user` in on test_client.

    Usage:
        await login(user)
        response = await test_client.get("/settings/profile")
    """
    async def _login(user: User) -> str:
        session = await auth_service.create_session(db_session, user.id)
        await db_session.commit()
        token = auth_service.create_session_token(session)
        test_client.cookies.set(settings.session_cookie_name, token)
        return token

    return _login
