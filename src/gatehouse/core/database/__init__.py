"""Database layer - session management, base models, and mixins."""

from gatehouse.core.database.base import (
    Base,
    CreatedAtMixin,
    IntegerIdMixin,
    TimestampMixin,
    utcnow,
)
from gatehouse.core.database.session import (
    async_engine,
    async_session_factory,
    build_engine,
    get_db,
)


__all__ = [
    "Base",
    "CreatedAtMixin",
    "IntegerIdMixin",
    "TimestampMixin",
    "async_engine",
    "async_session_factory",
    "build_engine",
    "get_db",
    "utcnow",
]
