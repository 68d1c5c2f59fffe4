"""Pytest configuration and shared fixtures."""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.pool import NullPool, StaticPool

from gatehouse.core.auth.backend import create_access_token
from gatehouse.core.database import build_engine, get_db
from gatehouse.core.permissions.catalog import PermissionCatalog
from gatehouse.core.permissions.grants import UserPermissionRepository
from gatehouse.core.permissions.models import Permission
from gatehouse.core.permissions.types import (
    SET_LEVEL,
    EntitySet,
    PermissionType,
    Scope,
)
from gatehouse.main import create_app
# Importing gatehouse.models registers every table with Base.metadata
from gatehouse.models import Base, User
from tests.factories import UserFactory


# In-memory SQLite unless a real database is provided
TEST_DATABASE_URL = os.environ.get(
    "TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:"
)


def _engine_kwargs(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        # One shared connection keeps the in-memory database alive
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {"poolclass": NullPool}


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine."""
    engine = build_engine(
        TEST_DATABASE_URL,
        echo=False,
        **_engine_kwargs(TEST_DATABASE_URL),
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional database session for tests.

    Each test runs in its own transaction that is rolled back
    after the test completes, ensuring test isolation.
    """
    session_factory = async_sessionmaker(
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with engine.connect() as conn:
        await conn.begin()

        async with session_factory(bind=conn) as session:
            yield session

        await conn.rollback()


@pytest.fixture
async def app(db: AsyncSession):
    """Create test application instance."""
    application = create_app()

    # Override database dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# User, Token and Grant Fixtures
# ============================================================


@pytest.fixture
def create_user(db: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Return a coroutine function that persists a user built by UserFactory."""

    async def _create(**kwargs: Any) -> User:
        user = UserFactory.build(**kwargs)
        db.add(user)
        await db.flush()
        return user

    return _create


@pytest.fixture
async def user(create_user: Callable[..., Awaitable[User]]) -> User:
    """A persisted user without any grants."""
    return await create_user()


@pytest.fixture
def headers_for() -> Callable[[User], dict[str, str]]:
    """Return a function building bearer headers for a user."""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(user_id=user.id)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def auth_headers(
    user: User, headers_for: Callable[[User], dict[str, str]]
) -> dict[str, str]:
    """Authorization headers for the ``user`` fixture."""
    return headers_for(user)


@pytest.fixture
def grant(db: AsyncSession) -> Callable[..., Awaitable[Permission]]:
    """Return a coroutine function that directly grants a permission to a user.

    The permission is created first when it does not exist yet.
    """

    async def _grant(
        user: User,
        entity_set: EntitySet,
        permission_type: PermissionType,
        scope: Scope = SET_LEVEL,
    ) -> Permission:
        catalog = PermissionCatalog(db)
        permission = await catalog.get_by_tuple(entity_set, permission_type, scope)
        if permission is None:
            permission = await catalog.create(entity_set, permission_type, scope)
        await UserPermissionRepository(db).create(user.id, permission.id)
        return permission

    return _grant
