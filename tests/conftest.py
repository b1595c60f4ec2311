"""Pytest configuration and fixtures."""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Register every table on the metadata
import barstock.models  # noqa: F401
from barstock.core.db import Base, get_db
from barstock.main import create_app
from barstock.models.enums import UserRole
from barstock.models.user import User
from tests.factories import UserFactory

# In-memory SQLite by default; point at Postgres to exercise row locks for real
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # One shared connection so every session sees the same in-memory database
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {}


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create fresh DB session for each test."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **_engine_options(TEST_DATABASE_URL))
    async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


async def _client_for(db_session: AsyncSession, user: User | None):
    """App client sharing the test session; user=None keeps real session auth."""
    from barstock.api.auth import get_current_user

    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    if user is not None:

        async def override_get_current_user():
            # Re-read the row each request, like the real dependency does
            await db_session.refresh(user)
            return user

        app.dependency_overrides[get_current_user] = override_get_current_user

    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest_asyncio.fixture
async def client(db_session):
    """Client signed in as a staff account."""
    test_user = await UserFactory.create(
        db_session,
        email="staff@example.com",
        display_name="Staff User",
        role=UserRole.STAFF.value,
    )

    async with await _client_for(db_session, test_user) as ac:
        ac.test_user = test_user
        ac.db_session = db_session
        yield ac


@pytest_asyncio.fixture
async def admin_client(db_session):
    """Client signed in as an admin account."""
    admin_user = await UserFactory.create(
        db_session,
        email="admin@example.com",
        display_name="Admin User",
        role=UserRole.ADMIN.value,
    )

    async with await _client_for(db_session, admin_user) as ac:
        ac.test_user = admin_user
        ac.db_session = db_session
        yield ac


@pytest_asyncio.fixture
async def viewer_client(db_session):
    """Client signed in as a read-only viewer."""
    viewer_user = await UserFactory.create(
        db_session,
        email="viewer@example.com",
        display_name="Viewer User",
        role=UserRole.VIEWER.value,
    )

    async with await _client_for(db_session, viewer_user) as ac:
        ac.test_user = viewer_user
        ac.db_session = db_session
        yield ac


@pytest.fixture
async def unauthenticated_client(db_session: AsyncSession) -> AsyncClient:
    """AsyncClient without auth overrides (real session cookie flow)."""
    async with await _client_for(db_session, None) as ac:
        ac.db_session = db_session
        yield ac


@pytest.fixture
async def staff_user(db_session: AsyncSession) -> User:
    return await UserFactory.create(db_session, email="counter@example.com", role=UserRole.STAFF.value)


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await UserFactory.create(db_session, email="owner@example.com", role=UserRole.ADMIN.value)


@pytest.fixture
async def viewer_user(db_session: AsyncSession) -> User:
    return await UserFactory.create(db_session, email="auditor@example.com", role=UserRole.VIEWER.value)
