"""Authorization resolver.

Decides whether a user may act on an entity set or one of its entities,
and enumerates what a user may act on. A permission reaches a user through
two grant paths that are always combined:

- role path: user -> UserRole -> RolePermission -> Permission
- direct path: user -> UserPermission -> Permission

A set-level permission (``entity IS NULL``) satisfies every entity query
for its ``(entity_set, permission_type)`` pair.

Every operation is a single read query combining both paths, so the
existence check and the enumeration can never disagree. Deny outcomes are
returned as ``False`` or empty results; only store failures raise.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Annotated, Any

import structlog
from fastapi import Depends
from sqlalchemy import (
    ColumnElement,
    CompoundSelect,
    Executable,
    Result,
    Select,
    case,
    or_,
    select,
    union,
)
from sqlalchemy.exc import SQLAlchemyError

from gatehouse.api.dependencies import DBSession
from gatehouse.core.errors import StoreError
from gatehouse.core.permissions.models import (
    Permission,
    RolePermission,
    UserPermission,
    UserRole,
)
from gatehouse.core.permissions.types import (
    SET_LEVEL,
    EntitySet,
    Instance,
    PermissionType,
    Scope,
    SetLevel,
    ordered_types,
    scope_of,
)


logger = structlog.get_logger()


def covering_scope(scope: Scope) -> ColumnElement[bool]:
    """Filter permissions that cover ``scope``.

    A set-level query is only covered by set-level permissions; an
    instance query is covered by set-level permissions or by permissions
    on that exact instance.
    """
    if isinstance(scope, SetLevel):
        return Permission.entity.is_(None)
    return or_(Permission.entity.is_(None), Permission.entity == scope.id)


def effective_types(
    types_by_scope: dict[Scope, list[PermissionType]],
    entity_id: int,
) -> list[PermissionType]:
    """Union the set-level types into one entity's instance types."""
    combined = set(types_by_scope.get(SET_LEVEL, []))
    combined.update(types_by_scope.get(Instance(entity_id), []))
    return ordered_types(combined)


@dataclass(slots=True)
class AuthorizationSummary:
    """Entity sets on which a user holds any grant, split by scope."""

    set_level: list[EntitySet] = field(default_factory=list)
    instance_level: list[EntitySet] = field(default_factory=list)


class AuthorizationResolver:
    """Stateless access decisions over the grant and membership tables.

    Holds no state besides the session; every call re-queries the store.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    def _role_path(self, user_id: int, *columns: Any) -> Select[Any]:
        return (
            select(*columns)
            .select_from(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(UserRole, UserRole.role_id == RolePermission.role_id)
            .where(UserRole.user_id == user_id)
        )

    def _direct_path(self, user_id: int, *columns: Any) -> Select[Any]:
        return (
            select(*columns)
            .select_from(Permission)
            .join(UserPermission, UserPermission.permission_id == Permission.id)
            .where(UserPermission.user_id == user_id)
        )

    def _granted(
        self,
        user_id: int,
        columns: Sequence[Any],
        *criteria: ColumnElement[bool],
    ) -> CompoundSelect:
        """Distinct ``columns`` of permissions matching ``criteria`` via either path."""
        return union(
            self._role_path(user_id, *columns).where(*criteria),
            self._direct_path(user_id, *columns).where(*criteria),
        )

    async def _execute(self, stmt: Executable, operation: str) -> Result[Any]:
        try:
            return await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.exception("resolver_query_failed", operation=operation)
            raise StoreError() from exc

    async def check_access(
        self,
        user_id: int,
        entity_set: EntitySet,
        permission_type: PermissionType,
        scope: Scope = SET_LEVEL,
    ) -> bool:
        """Check whether a user holds a permission covering ``scope``.

        With ``SET_LEVEL`` this asks for the set-level grant itself, not
        for access to some entity of the set.

        Args:
            user_id: The user's ID
            entity_set: The entity set being accessed
            permission_type: The action being performed
            scope: Set level or a single instance

        Returns:
            True if either grant path yields a covering permission

        Raises:
            StoreError: If the query fails
        """
        criteria = (
            Permission.entity_set == entity_set,
            Permission.permission_type == permission_type,
            covering_scope(scope),
        )
        stmt = select(
            or_(
                self._role_path(user_id, Permission.id).where(*criteria).exists(),
                self._direct_path(user_id, Permission.id).where(*criteria).exists(),
            )
        )
        result = await self._execute(stmt, "check_access")
        granted = bool(result.scalar())

        logger.debug(
            "access_resolved",
            user_id=user_id,
            entity_set=str(entity_set),
            permission_type=str(permission_type),
            scope=str(scope),
            granted=granted,
        )
        return granted

    async def check_access_many(
        self,
        user_id: int,
        entity_set: EntitySet,
        permission_type: PermissionType,
        entities: Sequence[int],
    ) -> bool:
        """Check whether a user may act on every one of ``entities``.

        All or nothing: one uncovered entity denies the whole batch. A
        set-level grant covers any batch. Duplicate ids count once.

        Raises:
            StoreError: If the query fails
        """
        requested = set(entities)
        if not requested:
            return True

        stmt = self._granted(
            user_id,
            (Permission.entity,),
            Permission.entity_set == entity_set,
            Permission.permission_type == permission_type,
            or_(Permission.entity.is_(None), Permission.entity.in_(sorted(requested))),
        )
        result = await self._execute(stmt, "check_access_many")
        granted = set(result.scalars().all())

        if None in granted:
            return True
        return len(granted) == len(requested)

    async def find_accessible_entities(
        self,
        user_id: int,
        entity_set: EntitySet,
        permission_type: PermissionType,
    ) -> list[Scope]:
        """Enumerate the scopes a user may act on.

        ``SET_LEVEL`` in the result means every entity is accessible and
        comes first; callers must check for it before treating the
        remaining ``Instance`` entries as an allow-list. An empty result
        means no access.

        Raises:
            StoreError: If the query fails
        """
        stmt = self._granted(
            user_id,
            (Permission.entity,),
            Permission.entity_set == entity_set,
            Permission.permission_type == permission_type,
        )
        result = await self._execute(stmt, "find_accessible_entities")
        entities = set(result.scalars().all())

        scopes: list[Scope] = [SET_LEVEL] if None in entities else []
        scopes.extend(Instance(e) for e in sorted(e for e in entities if e is not None))
        return scopes

    async def find_permission_types_for_entity(
        self,
        user_id: int,
        entity_set: EntitySet,
        scope: Scope = SET_LEVEL,
    ) -> list[PermissionType]:
        """List the permission types a user holds on ``scope``.

        For an instance this includes the set-level types, since those
        cover every instance.

        Raises:
            StoreError: If the query fails
        """
        stmt = self._granted(
            user_id,
            (Permission.permission_type,),
            Permission.entity_set == entity_set,
            covering_scope(scope),
        )
        result = await self._execute(stmt, "find_permission_types_for_entity")
        return ordered_types({PermissionType(t) for t in result.scalars().all()})

    async def find_permission_types_for_entities(
        self,
        user_id: int,
        entity_set: EntitySet,
        entities: Sequence[int],
    ) -> dict[Scope, list[PermissionType]]:
        """Batched :meth:`find_permission_types_for_entity`.

        The result always has a ``SET_LEVEL`` entry with the blanket types;
        ``Instance`` entries hold only instance-specific types and are
        omitted for entities without any. Use :func:`effective_types` to
        get one entity's full set.

        Raises:
            StoreError: If the query fails
        """
        scope_filter = Permission.entity.is_(None)
        if entities:
            requested = Permission.entity.in_(sorted(set(entities)))
            scope_filter = or_(scope_filter, requested)

        stmt = self._granted(
            user_id,
            (Permission.entity, Permission.permission_type),
            Permission.entity_set == entity_set,
            scope_filter,
        )
        result = await self._execute(stmt, "find_permission_types_for_entities")

        grouped: dict[Scope, set[PermissionType]] = {SET_LEVEL: set()}
        for entity, permission_type in result.all():
            scoped = grouped.setdefault(scope_of(entity), set())
            scoped.add(PermissionType(permission_type))

        return {scope: ordered_types(types) for scope, types in grouped.items()}

    async def find_authorization_summary(self, user_id: int) -> AuthorizationSummary:
        """Group the entity sets a user holds grants on by grant scope.

        Raises:
            StoreError: If the query fails
        """
        is_set_level = case((Permission.entity.is_(None), True), else_=False)
        stmt = self._granted(
            user_id,
            (Permission.entity_set, is_set_level.label("is_set_level")),
        )
        result = await self._execute(stmt, "find_authorization_summary")

        summary = AuthorizationSummary()
        for entity_set, set_level in sorted(result.all(), key=lambda row: str(row[0])):
            target = summary.set_level if set_level else summary.instance_level
            target.append(EntitySet(entity_set))
        return summary


# Type alias for dependency injection
Resolver = Annotated[AuthorizationResolver, Depends(AuthorizationResolver)]
