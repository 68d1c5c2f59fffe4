"""Import every ORM model so the mapper registry and metadata are complete.

Alembic's ``env.py`` and the test suite import this module before touching
``Base.metadata``.
"""

from gatehouse.core.database.base import Base
from gatehouse.core.permissions.models import (
    Permission,
    Role,
    RolePermission,
    UserPermission,
    UserRole,
)
from gatehouse.modules.items.models import Item
from gatehouse.modules.users.models import User


__all__ = [
    "Base",
    "Item",
    "Permission",
    "Role",
    "RolePermission",
    "User",
    "UserPermission",
    "UserRole",
]
