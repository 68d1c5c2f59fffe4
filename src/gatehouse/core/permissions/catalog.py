"""Permission catalog - the set of grantable permissions.

Permissions are created one at a time by administrators or generated in
bulk when an entity set or a new entity instance is provisioned.
"""

from collections.abc import Sequence
from typing import Annotated

import structlog
from fastapi import Depends
from sqlalchemy import ColumnElement, delete, select
from sqlalchemy.exc import IntegrityError

from gatehouse.api.dependencies import DBSession
from gatehouse.core.errors import ConflictError, NotFoundError, ValidationError
from gatehouse.core.permissions.models import Permission
from gatehouse.core.permissions.registry import instance_table
from gatehouse.core.permissions.types import (
    INSTANCE_PERMISSION_TYPES,
    SET_LEVEL,
    SET_PERMISSION_TYPES,
    EntitySet,
    Instance,
    PermissionType,
    Scope,
    SetLevel,
)


logger = structlog.get_logger()


def exact_scope(scope: Scope) -> ColumnElement[bool]:
    """Filter permissions whose scope is exactly ``scope``."""
    if isinstance(scope, SetLevel):
        return Permission.entity.is_(None)
    return Permission.entity == scope.id


class PermissionCatalog:
    """Repository for Permission rows.

    Enforces uniqueness of ``(entity_set, permission_type, scope)`` and
    generates the standard permission batches for sets and instances.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def get_by_id(self, permission_id: int) -> Permission | None:
        """Get a permission by ID.

        Args:
            permission_id: The permission's ID

        Returns:
            Permission if found, None otherwise
        """
        return await self.session.get(Permission, permission_id)

    async def get_by_ids(self, permission_ids: Sequence[int]) -> list[Permission]:
        """Get all permissions whose ID is in ``permission_ids``.

        Unknown ids are skipped; results are ordered by ID.
        """
        if not permission_ids:
            return []
        stmt = (
            select(Permission)
            .where(Permission.id.in_(sorted(set(permission_ids))))
            .order_by(Permission.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_tuple(
        self,
        entity_set: EntitySet,
        permission_type: PermissionType,
        scope: Scope = SET_LEVEL,
    ) -> Permission | None:
        """Get the permission identified by its natural key.

        Args:
            entity_set: The entity set
            permission_type: The permission type
            scope: Set level or a single instance

        Returns:
            Permission if found, None otherwise
        """
        stmt = select(Permission).where(
            Permission.entity_set == entity_set,
            Permission.permission_type == permission_type,
            exact_scope(scope),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_all(self, entity_set: EntitySet | None = None) -> list[Permission]:
        """List permissions, optionally restricted to one entity set."""
        stmt = select(Permission).order_by(Permission.id)
        if entity_set is not None:
            stmt = stmt.where(Permission.entity_set == entity_set)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(
        self,
        entity_set: EntitySet,
        permission_type: PermissionType,
        scope: Scope = SET_LEVEL,
    ) -> Permission:
        """Create a single permission.

        Raises:
            ConflictError: If the permission already exists
            ValidationError: If the set has no instances to scope to
            NotFoundError: If the scoped entity does not exist
        """
        [permission] = await self._insert_batch(entity_set, (permission_type,), scope)
        return permission

    async def generate_set_permissions(self, entity_set: EntitySet) -> list[Permission]:
        """Create one set-level permission per permission type.

        The batch is atomic: if any of the permissions already exists,
        nothing is written.

        Raises:
            ConflictError: If any set-level permission already exists
        """
        return await self._insert_batch(entity_set, SET_PERMISSION_TYPES, SET_LEVEL)

    async def generate_entity_permissions(
        self,
        entity_set: EntitySet,
        entity_id: int,
    ) -> list[Permission]:
        """Create the instance-level permissions for a newly provisioned entity.

        Instances get read, update, delete and share; create only exists at
        set level. The batch is atomic.

        Raises:
            ValidationError: If the entity set has no instances
            NotFoundError: If the entity does not exist
            ConflictError: If any of the permissions already exists
        """
        return await self._insert_batch(
            entity_set, INSTANCE_PERMISSION_TYPES, Instance(entity_id)
        )

    async def delete_entity_permissions(
        self,
        entity_set: EntitySet,
        entity_id: int,
    ) -> int:
        """Delete the instance-level permissions of a removed entity.

        Grants of these permissions are removed by the foreign key cascade.

        Returns:
            Number of permissions deleted
        """
        stmt = delete(Permission).where(
            Permission.entity_set == entity_set,
            Permission.entity == entity_id,
        )
        result = await self.session.execute(stmt)
        logger.info(
            "permissions_deleted",
            entity_set=str(entity_set),
            entity=entity_id,
            count=result.rowcount,
        )
        return result.rowcount

    async def _ensure_scope_target(self, entity_set: EntitySet, scope: Scope) -> None:
        if isinstance(scope, SetLevel):
            return

        table = instance_table(entity_set)
        if table is None:
            raise ValidationError(
                f"Entity set '{entity_set}' has no instances to scope permissions to",
                error_code="set_level_only",
                details={"entity_set": str(entity_set)},
            )

        result = await self.session.execute(
            select(table.c.id).where(table.c.id == scope.id)
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(
                f"{entity_set} {scope.id} not found",
                resource=str(entity_set),
                resource_id=scope.id,
            )

    async def _insert_batch(
        self,
        entity_set: EntitySet,
        permission_types: Sequence[PermissionType],
        scope: Scope,
    ) -> list[Permission]:
        await self._ensure_scope_target(entity_set, scope)

        existing_stmt = select(Permission.permission_type).where(
            Permission.entity_set == entity_set,
            Permission.permission_type.in_(permission_types),
            exact_scope(scope),
        )
        existing = list((await self.session.execute(existing_stmt)).scalars().all())
        if existing:
            raise ConflictError(
                "Permission already exists",
                error_code="duplicate_permission",
                details={
                    "entity_set": str(entity_set),
                    "permission_types": [str(t) for t in existing],
                    "entity": scope.entity,
                },
            )

        permissions = [
            Permission(
                entity_set=entity_set,
                permission_type=permission_type,
                entity=scope.entity,
            )
            for permission_type in permission_types
        ]
        self.session.add_all(permissions)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError(
                "Permission already exists",
                error_code="duplicate_permission",
                details={"entity_set": str(entity_set), "entity": scope.entity},
            ) from exc

        logger.info(
            "permissions_generated",
            entity_set=str(entity_set),
            scope=str(scope),
            count=len(permissions),
        )
        return permissions


# Type alias for dependency injection
Catalog = Annotated[PermissionCatalog, Depends(PermissionCatalog)]
