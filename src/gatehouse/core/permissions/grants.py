"""Grant store - the two paths a permission can reach a user through.

``RolePermissionRepository`` grants permissions to roles and
``UserPermissionRepository`` grants them directly to users. Rows are
immutable; changing a grant means deleting and recreating it.
"""

from collections.abc import Sequence
from typing import Annotated

import structlog
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from gatehouse.api.dependencies import DBSession
from gatehouse.core.errors import ConflictError, NotFoundError
from gatehouse.core.permissions.models import (
    Permission,
    Role,
    RolePermission,
    UserPermission,
)
from gatehouse.modules.users.models import User


logger = structlog.get_logger()


class RolePermissionRepository:
    """Repository for role -> permission grants."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def get(self, role_id: int, permission_id: int) -> RolePermission | None:
        """Get a grant by its composite key."""
        return await self.session.get(RolePermission, (role_id, permission_id))

    async def find_by_role_ids(self, role_ids: Sequence[int]) -> list[RolePermission]:
        """Get the grants of the given roles, each with its permission loaded."""
        stmt = (
            select(RolePermission)
            .where(RolePermission.role_id.in_(sorted(set(role_ids))))
            .order_by(RolePermission.role_id, RolePermission.permission_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_permission_ids(
        self, permission_ids: Sequence[int]
    ) -> list[RolePermission]:
        """Get the grants of the given permissions, each with its role loaded."""
        stmt = (
            select(RolePermission)
            .where(RolePermission.permission_id.in_(sorted(set(permission_ids))))
            .order_by(RolePermission.permission_id, RolePermission.role_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, role_id: int, permission_id: int) -> RolePermission:
        """Grant a permission to a role.

        Args:
            role_id: The role receiving the permission
            permission_id: The permission being granted

        Returns:
            The created grant

        Raises:
            NotFoundError: If the role or permission does not exist
            ConflictError: If the role already holds the permission
        """
        role = await self.session.get(Role, role_id)
        if role is None:
            raise NotFoundError("Role not found", resource="role", resource_id=role_id)
        permission = await self.session.get(Permission, permission_id)
        if permission is None:
            raise NotFoundError(
                "Permission not found", resource="permission", resource_id=permission_id
            )
        if await self.get(role_id, permission_id) is not None:
            raise ConflictError(
                "Role already holds this permission",
                error_code="duplicate_grant",
                details={"role_id": role_id, "permission_id": permission_id},
            )

        grant = RolePermission(role=role, permission=permission)
        self.session.add(grant)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError(
                "Role already holds this permission",
                error_code="duplicate_grant",
                details={"role_id": role_id, "permission_id": permission_id},
            ) from exc

        logger.info(
            "grant_created",
            path="role",
            role_id=role_id,
            permission=permission.name,
        )
        return grant

    async def delete(self, role_id: int, permission_id: int) -> None:
        """Revoke a permission from a role.

        Raises:
            NotFoundError: If the grant does not exist
        """
        grant = await self.get(role_id, permission_id)
        if grant is None:
            raise NotFoundError(
                "Role permission not found",
                resource="role_permission",
                resource_id=f"{role_id}:{permission_id}",
            )
        await self.session.delete(grant)
        await self.session.flush()
        logger.info(
            "grant_deleted",
            path="role",
            role_id=role_id,
            permission_id=permission_id,
        )


class UserPermissionRepository:
    """Repository for direct user -> permission grants."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def get(self, user_id: int, permission_id: int) -> UserPermission | None:
        """Get a grant by its composite key."""
        return await self.session.get(UserPermission, (user_id, permission_id))

    async def find_by_user_ids(self, user_ids: Sequence[int]) -> list[UserPermission]:
        """Get the direct grants of the given users, each with its permission loaded."""
        stmt = (
            select(UserPermission)
            .where(UserPermission.user_id.in_(sorted(set(user_ids))))
            .order_by(UserPermission.user_id, UserPermission.permission_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_permission_ids(
        self, permission_ids: Sequence[int]
    ) -> list[UserPermission]:
        """Get the direct grants of the given permissions, each with its user loaded."""
        stmt = (
            select(UserPermission)
            .where(UserPermission.permission_id.in_(sorted(set(permission_ids))))
            .order_by(UserPermission.permission_id, UserPermission.user_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, user_id: int, permission_id: int) -> UserPermission:
        """Grant a permission directly to a user.

        Raises:
            NotFoundError: If the user or permission does not exist
            ConflictError: If the user already holds the direct grant
        """
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found", resource="user", resource_id=user_id)
        permission = await self.session.get(Permission, permission_id)
        if permission is None:
            raise NotFoundError(
                "Permission not found", resource="permission", resource_id=permission_id
            )
        if await self.get(user_id, permission_id) is not None:
            raise ConflictError(
                "User already holds this permission",
                error_code="duplicate_grant",
                details={"user_id": user_id, "permission_id": permission_id},
            )

        grant = UserPermission(user=user, permission=permission)
        self.session.add(grant)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError(
                "User already holds this permission",
                error_code="duplicate_grant",
                details={"user_id": user_id, "permission_id": permission_id},
            ) from exc

        logger.info(
            "grant_created",
            path="user",
            user_id=user_id,
            permission=permission.name,
        )
        return grant

    async def grant_all(self, user_id: int, permissions: Sequence[Permission]) -> None:
        """Directly grant freshly generated permissions to a user.

        Used for ownership grants right after an entity is provisioned,
        so no duplicate check is needed.
        """
        self.session.add_all(
            UserPermission(user_id=user_id, permission_id=permission.id)
            for permission in permissions
        )
        await self.session.flush()
        logger.info(
            "ownership_granted",
            user_id=user_id,
            permissions=[permission.name for permission in permissions],
        )

    async def delete(self, user_id: int, permission_id: int) -> None:
        """Revoke a direct grant from a user.

        Raises:
            NotFoundError: If the grant does not exist
        """
        grant = await self.get(user_id, permission_id)
        if grant is None:
            raise NotFoundError(
                "User permission not found",
                resource="user_permission",
                resource_id=f"{user_id}:{permission_id}",
            )
        await self.session.delete(grant)
        await self.session.flush()
        logger.info(
            "grant_deleted",
            path="user",
            user_id=user_id,
            permission_id=permission_id,
        )


# Type aliases for dependency injection
RolePermissionRepo = Annotated[
    RolePermissionRepository, Depends(RolePermissionRepository)
]
UserPermissionRepo = Annotated[
    UserPermissionRepository, Depends(UserPermissionRepository)
]
