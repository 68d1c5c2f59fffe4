"""Async engines and sessions.

Every engine the package opens comes from ``build_engine``. Grant rows are
removed with their permission, role or user through ``ON DELETE CASCADE``,
and SQLite only honours that once ``PRAGMA foreign_keys`` is on for the
connection.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from gatehouse.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **options: Any) -> AsyncEngine:
    """Create an async engine for ``url``.

    Args:
        url: Async database URL, e.g. ``sqlite+aiosqlite:///gatehouse.db``
        **options: Passed through to ``create_async_engine``

    Returns:
        The engine, with foreign key enforcement switched on for SQLite
    """
    engine = create_async_engine(url, **options)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _engine_options() -> dict[str, Any]:
    """Pool options for the configured dialect.

    SQLite engines use a static or null pool and reject sizing arguments.
    """
    options: dict[str, Any] = {"echo": settings.database_echo}
    if not settings.async_database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
        )
    return options


async_engine = build_engine(settings.async_database_url, **_engine_options())

async_session_factory = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session.

    The session commits when the request handler returns and rolls back
    when it raises, so every request is one transaction.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
