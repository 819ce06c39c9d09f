"""
Test fixtures for the Book Catalog API test suite.

This module provides shared fixtures used across all test files:

  - db_engine / db_session: Fresh in-memory SQLite database for each test
  - make_client: Factory for async HTTP clients sharing that database
  - client: Anonymous test client
  - authenticated_client: Client logged in as a regular USER
  - admin_client: Client logged in as an ADMIN

Key design decisions:
  - Required settings (secret key, Google client credentials) are set in
    the environment before anything from `app` is imported, because the
    settings object is built at import time and refuses to start without them.
  - In-memory SQLite with a StaticPool, so every session in a test (the
    app's and the test's own) sees the same database.
  - Each logged-in fixture gets its own AsyncClient, so cookies and
    Authorization headers of different users never mix.
  - The admin_client fixture signs up normally and then promotes the user
    directly in the database, the same way demo/promote_admin.py does.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from helpers import ADMIN_CREDENTIALS, USER_CREDENTIALS, promote, signup_and_login


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine with all tables for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Provide an async session bound to the test engine."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def make_client(session_factory):
    """
    Factory for async HTTP test clients with the test database injected.

    This overrides the get_db dependency so all requests hit the
    in-memory test database instead of the real one.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    clients = []

    def _make() -> AsyncClient:
        ac = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(ac)
        return ac

    yield _make

    for ac in clients:
        await ac.aclose()
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(make_client):
    """Anonymous test client."""
    return make_client()


@pytest_asyncio.fixture
async def authenticated_client(make_client):
    """
    Test client logged in as a regular USER.

    The session token is sent as a Bearer header (the client's cookie jar
    also holds the session cookie from the login response).
    """
    ac = make_client()
    data = await signup_and_login(ac, USER_CREDENTIALS)
    ac.headers["Authorization"] = f"Bearer {data['token']}"
    return ac


@pytest_asyncio.fixture
async def admin_client(make_client, session_factory):
    """
    Test client logged in as an ADMIN.

    Role is re-read from the database on every request, so promoting
    before or after login makes no difference; we promote first so the
    login response already reports the admin role.
    """
    ac = make_client()
    response = await ac.post("/auth/signup", json=ADMIN_CREDENTIALS)
    assert response.status_code == 201
    await promote(session_factory, ADMIN_CREDENTIALS["email"])

    response = await ac.post(
        "/auth/login",
        json={"email": ADMIN_CREDENTIALS["email"], "password": ADMIN_CREDENTIALS["password"]},
    )
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "admin"
    ac.headers["Authorization"] = f"Bearer {response.json()['token']}"
    return ac
