"""Membership store - which users hold which roles."""

from collections.abc import Sequence
from typing import Annotated

import structlog
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from gatehouse.api.dependencies import DBSession
from gatehouse.core.errors import ConflictError, NotFoundError
from gatehouse.core.permissions.models import Role, UserRole
from gatehouse.modules.users.models import User


logger = structlog.get_logger()


class UserRoleRepository:
    """Repository for user <-> role memberships."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def get(self, user_id: int, role_id: int) -> UserRole | None:
        """Get a membership by its composite key."""
        return await self.session.get(UserRole, (user_id, role_id))

    async def find_by_user_ids(self, user_ids: Sequence[int]) -> list[UserRole]:
        """Get the memberships of the given users, each with its role loaded."""
        stmt = (
            select(UserRole)
            .where(UserRole.user_id.in_(sorted(set(user_ids))))
            .order_by(UserRole.user_id, UserRole.role_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_role_ids(self, role_ids: Sequence[int]) -> list[UserRole]:
        """Get the memberships of the given roles, each with its user loaded."""
        stmt = (
            select(UserRole)
            .where(UserRole.role_id.in_(sorted(set(role_ids))))
            .order_by(UserRole.role_id, UserRole.user_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, user_id: int, role_id: int) -> UserRole:
        """Add a user to a role.

        Args:
            user_id: The user joining the role
            role_id: The role being joined

        Returns:
            The created membership

        Raises:
            NotFoundError: If the user or role does not exist
            ConflictError: If the user already holds the role
        """
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found", resource="user", resource_id=user_id)
        role = await self.session.get(Role, role_id)
        if role is None:
            raise NotFoundError("Role not found", resource="role", resource_id=role_id)
        if await self.get(user_id, role_id) is not None:
            raise ConflictError(
                "User already holds this role",
                error_code="duplicate_membership",
                details={"user_id": user_id, "role_id": role_id},
            )

        membership = UserRole(user=user, role=role)
        self.session.add(membership)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError(
                "User already holds this role",
                error_code="duplicate_membership",
                details={"user_id": user_id, "role_id": role_id},
            ) from exc

        logger.info("membership_created", user_id=user_id, role=role.name)
        return membership

    async def delete(self, user_id: int, role_id: int) -> None:
        """Remove a user from a role.

        Raises:
            NotFoundError: If the membership does not exist
        """
        membership = await self.get(user_id, role_id)
        if membership is None:
            raise NotFoundError(
                "User role not found",
                resource="user_role",
                resource_id=f"{user_id}:{role_id}",
            )
        await self.session.delete(membership)
        await self.session.flush()
        logger.info("membership_deleted", user_id=user_id, role_id=role_id)


# Type alias for dependency injection
UserRoleRepo = Annotated[UserRoleRepository, Depends(UserRoleRepository)]
