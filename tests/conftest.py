"""Pytest configuration and fixtures."""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from tutordesk.core.db import Base, get_db
from tutordesk.main import create_app

# Import all models
from tutordesk.models.enrollment import Enrollment  # noqa: F401
from tutordesk.models.tutoring_session import TutoringSession  # noqa: F401
from tutordesk.models.user import User, UserRole  # noqa: F401
from tests.factories import UserFactory

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_tutordesk.db")


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Send uploads of every test to its own temp directory."""
    directory = tmp_path / "uploads"
    monkeypatch.setenv("UPLOAD_DIR", str(directory))
    return directory


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create fresh DB session for each test."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    # Provide session
    async with async_session_maker() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_session: AsyncSession):
    """Independent sessions on the test database, for interleaving transactions."""
    return async_sessionmaker(db_session.bind, class_=AsyncSession, expire_on_commit=False)


async def _client_for(db_session: AsyncSession, user: User):
    """Build an app whose requests run as the given user on the test session."""
    from tutordesk.api.auth import get_current_user

    app = create_app()

    async def override_get_db():
        yield db_session

    async def override_get_current_user():
        return user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    return app


@pytest_asyncio.fixture
async def client(db_session):
    """Async test client authenticated as a regular (student) user."""
    student = await UserFactory.create(
        db_session,
        email="student@example.com",
        first_name="Nimal",
        last_name="Perera",
    )
    app = await _client_for(db_session, student)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        # Attach test_user to client for test access
        ac.test_user = student
        ac.db_session = db_session
        yield ac


@pytest_asyncio.fixture
async def admin_client(db_session):
    """Async test client authenticated as an admin."""
    admin_user = await UserFactory.create(
        db_session,
        email="admin@example.com",
        first_name="Admin",
        last_name="User",
        role=UserRole.ADMIN.value,
    )
    app = await _client_for(db_session, admin_user)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        ac.test_user = admin_user
        ac.db_session = db_session
        yield ac


@pytest_asyncio.fixture
async def unauthenticated_client(db_session: AsyncSession):
    """AsyncClient without the auth override (for testing auth failures)."""
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        ac.db_session = db_session
        yield ac
