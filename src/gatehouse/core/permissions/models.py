"""Permission system database models.

This module defines the access-control tables:
- Permission: an action on an entity set, optionally scoped to one entity
- Role: a named bundle of permissions
- RolePermission: grants a permission to a role
- UserRole: makes a user a member of a role
- UserPermission: grants a permission directly to a user

A user holds a permission when it is reachable through any role the user
belongs to or through a direct grant. There are no deny rows.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Enum, ForeignKey, Index, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gatehouse.core.constants import (
    MAX_ENTITY_SET_LENGTH,
    MAX_PERMISSION_TYPE_LENGTH,
    MAX_ROLE_NAME_LENGTH,
)
from gatehouse.core.database.base import (
    Base,
    CreatedAtMixin,
    IntegerIdMixin,
    TimestampMixin,
)
from gatehouse.core.permissions.types import EntitySet, PermissionType, Scope, scope_of


if TYPE_CHECKING:
    from gatehouse.modules.users.models import User


def _enum_values(enum_cls: type[EntitySet] | type[PermissionType]) -> list[str]:
    return [member.value for member in enum_cls]


class Permission(Base, IntegerIdMixin, CreatedAtMixin):
    """Permission model representing an action on an entity set.

    Attributes:
        entity_set: The entity set being protected (e.g. "item")
        permission_type: The action allowed (create, read, update, delete, share)
        entity: Id of the single entity covered, or NULL for the whole set

    Examples:
        - ("item", "read", None) -> Can read every item
        - ("item", "update", 7) -> Can update item 7 only
    """

    __tablename__ = "permissions"
    __table_args__ = (
        UniqueConstraint(
            "entity_set",
            "permission_type",
            "entity",
            name="uq_permission_set_type_entity",
        ),
        # NULLs never collide in a unique constraint, so set-level rows
        # need their own partial index.
        Index(
            "uq_permission_set_level",
            "entity_set",
            "permission_type",
            unique=True,
            postgresql_where=text("entity IS NULL"),
            sqlite_where=text("entity IS NULL"),
        ),
        Index("ix_permissions_entity_set_entity", "entity_set", "entity"),
        {"sqlite_autoincrement": True},
    )

    entity_set: Mapped[EntitySet] = mapped_column(
        Enum(
            EntitySet,
            name="entity_set",
            native_enum=False,
            length=MAX_ENTITY_SET_LENGTH,
            values_callable=_enum_values,
        ),
        nullable=False,
    )
    permission_type: Mapped[PermissionType] = mapped_column(
        Enum(
            PermissionType,
            name="permission_type",
            native_enum=False,
            length=MAX_PERMISSION_TYPE_LENGTH,
            values_callable=_enum_values,
        ),
        nullable=False,
    )
    entity: Mapped[int | None] = mapped_column(nullable=True)

    @property
    def scope(self) -> Scope:
        """The scope this permission covers."""
        return scope_of(self.entity)

    @property
    def name(self) -> str:
        """Return the permission name as 'set:type:scope'."""
        return f"{self.entity_set}:{self.permission_type}:{self.scope}"

    def __repr__(self) -> str:
        return f"<Permission(id={self.id}, {self.name})>"


class Role(Base, IntegerIdMixin, TimestampMixin):
    """Role model representing a named set of permissions.

    Attributes:
        name: Unique role name (e.g., "admin", "editor")
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=False,
        unique=True,
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name})>"


class RolePermission(Base, CreatedAtMixin):
    """Grant of a permission to a role."""

    __tablename__ = "role_permissions"

    role_id: Mapped[int] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    permission_id: Mapped[int] = mapped_column(
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    role: Mapped["Role"] = relationship("Role", lazy="selectin")
    permission: Mapped["Permission"] = relationship("Permission", lazy="selectin")

    def __repr__(self) -> str:
        return (
            f"<RolePermission(role_id={self.role_id}, "
            f"permission_id={self.permission_id})>"
        )


class UserRole(Base, CreatedAtMixin):
    """Membership of a user in a role.

    A user can hold multiple roles, and their effective permissions are
    the union of all their roles' permissions plus direct grants.
    """

    __tablename__ = "user_roles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role_id: Mapped[int] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    user: Mapped["User"] = relationship("User", lazy="selectin")
    role: Mapped["Role"] = relationship("Role", lazy="selectin")

    def __repr__(self) -> str:
        return f"<UserRole(user_id={self.user_id}, role_id={self.role_id})>"


class UserPermission(Base, CreatedAtMixin):
    """Direct grant of a permission to a user, bypassing roles.

    Used for ownership, e.g. a user's access to their own account.
    """

    __tablename__ = "user_permissions"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    permission_id: Mapped[int] = mapped_column(
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    user: Mapped["User"] = relationship("User", lazy="selectin")
    permission: Mapped["Permission"] = relationship("Permission", lazy="selectin")

    def __repr__(self) -> str:
        return (
            f"<UserPermission(user_id={self.user_id}, "
            f"permission_id={self.permission_id})>"
        )
