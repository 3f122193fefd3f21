"""
Test Configuration — Fixtures for async DB, test client, and mock data.

Each test gets its own in-memory SQLite database, so no state leaks
between tests.
"""

import os
import uuid

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["GEMINI_API_KEY"] = ""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from api.deps import get_current_user, get_db
from api.main import app
from core.security import hash_password
from db.models import User
from db.repository import OwnerScopedRepository
from db.session import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

USER_ID = "00000000-0000-0000-0000-000000000001"
OTHER_USER_ID = "00000000-0000-0000-0000-000000000002"


@pytest.fixture
async def test_engine():
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_db(test_engine):
    session = AsyncSession(bind=test_engine, expire_on_commit=False)
    yield session
    await session.close()


@pytest.fixture
async def seeded_users(test_db):
    """Two tenants: the authenticated user and someone else."""
    users = [
        User(
            user_id=uuid.UUID(USER_ID),
            username="plant-manager",
            email="manager@acme.io",
            password_hash=hash_password("s3cret-pass"),
            role="manager",
        ),
        User(
            user_id=uuid.UUID(OTHER_USER_ID),
            username="other-tenant",
            email="other@acme.io",
            password_hash=hash_password("other-pass"),
            role="admin",
        ),
    ]
    test_db.add_all(users)
    await test_db.commit()
    return {"user": users[0], "other": users[1]}


@pytest.fixture
def mock_user():
    """Claims of the authenticated user."""
    return {"sub": USER_ID, "username": "plant-manager", "role": "manager"}


@pytest.fixture
def repo(test_db, seeded_users):
    return OwnerScopedRepository(test_db, USER_ID)


@pytest.fixture
def other_repo(test_db, seeded_users):
    return OwnerScopedRepository(test_db, OTHER_USER_ID)


@pytest.fixture
async def client(test_db, seeded_users, mock_user):
    """Create an async test client with dependency overrides."""

    async def override_get_db():
        yield test_db

    def override_get_current_user():
        return mock_user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def anon_client(test_db):
    """Client with a real DB session but no auth override."""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
