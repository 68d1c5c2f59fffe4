"""Role service for business logic."""

from typing import Annotated

import structlog
from fastapi import Depends

from gatehouse.api.dependencies import DBSession
from gatehouse.core.errors import ConflictError, NotFoundError
from gatehouse.core.permissions.catalog import PermissionCatalog
from gatehouse.core.permissions.grants import UserPermissionRepository
from gatehouse.core.permissions.models import Role
from gatehouse.core.permissions.types import EntitySet
from gatehouse.modules.roles.repos import RoleRepository


logger = structlog.get_logger()


class RoleService:
    """Service for role management operations.

    A new role gets its instance permissions provisioned, and the creator
    receives all of them through direct grants. Deleting a role removes
    those permissions again.
    """

    def __init__(self, db: DBSession) -> None:
        self.repo = RoleRepository(db)
        self.catalog = PermissionCatalog(db)
        self.user_permissions = UserPermissionRepository(db)

    async def _ensure_name_available(self, name: str) -> None:
        if await self.repo.get_by_name(name):
            raise ConflictError(
                "Role name already taken",
                error_code="role_exists",
                details={"name": name},
            )

    async def create_role(self, name: str, creator_id: int) -> Role:
        """Create a role owned by ``creator_id``.

        Raises:
            ConflictError: If the name is taken
        """
        await self._ensure_name_available(name)
        role = await self.repo.create(Role(name=name))

        permissions = await self.catalog.generate_entity_permissions(
            EntitySet.ROLE, role.id
        )
        await self.user_permissions.grant_all(creator_id, permissions)

        logger.info("role_created", role_id=role.id, creator_id=creator_id)
        return role

    async def get_role(self, role_id: int) -> Role:
        """Get a role by ID.

        Raises:
            NotFoundError: If role not found
        """
        role = await self.repo.get_by_id(role_id)
        if not role:
            raise NotFoundError("Role not found", resource="role", resource_id=role_id)
        return role

    async def list_roles(self, role_ids: list[int] | None = None) -> list[Role]:
        """List roles, restricted to ``role_ids`` when given."""
        return await self.repo.find_all(role_ids)

    async def rename_role(self, role_id: int, name: str) -> Role:
        """Rename a role.

        Raises:
            NotFoundError: If role not found
            ConflictError: If the new name is taken
        """
        role = await self.get_role(role_id)
        if name != role.name:
            await self._ensure_name_available(name)
            role.name = name
            await self.repo.session.flush()
        return role

    async def delete_role(self, role_id: int) -> None:
        """Delete a role and its instance permissions.

        Raises:
            NotFoundError: If role not found
        """
        role = await self.get_role(role_id)
        await self.catalog.delete_entity_permissions(EntitySet.ROLE, role_id)
        await self.repo.delete(role)
        logger.info("role_deleted", role_id=role_id)


# Type alias for dependency injection
RoleSvc = Annotated[RoleService, Depends(RoleService)]
