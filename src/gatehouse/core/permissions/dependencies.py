"""Authorization dependencies for route protection.

Each class is configured with the ``(entity_set, permission_type)`` a
route requires and is used as a FastAPI dependency, either in the route's
``dependencies=[...]`` chain or as a parameter when the handler needs the
resulting :class:`AccessScope`:

    read_roles = AccessibleEntitiesAuthorization(EntitySet.ROLE, PermissionType.READ)

    @router.get("/roles")
    async def list_roles(access: Annotated[AccessScope, Depends(read_roles)]):
        ...

Authentication runs first through ``CurrentUser``; identifiers are parsed
and validated before the resolver is called. A deny decision raises
``AuthorizationError``. The resulting scope is also stored on
``request.state.access``.
"""

import re

import structlog
from fastapi import Request

from gatehouse.core.auth.dependencies import CurrentUser
from gatehouse.core.constants import MAX_BATCH_IDS
from gatehouse.core.errors import AuthorizationError, ValidationError
from gatehouse.core.permissions.resolver import AuthorizationResolver, Resolver
from gatehouse.core.permissions.types import (
    SET_LEVEL,
    AccessScope,
    EntitySet,
    Instance,
    PermissionType,
)


logger = structlog.get_logger()

_ID_PATTERN = re.compile(r"[1-9][0-9]*")
_ID_LIST_PATTERN = re.compile(r"[1-9][0-9]*(,[1-9][0-9]*)*")


def parse_entity_id(raw: str | None, param: str) -> int:
    """Parse a positive integer id from a path parameter.

    Raises:
        ValidationError: If the value is missing or not a positive integer
    """
    if raw is None or not _ID_PATTERN.fullmatch(raw):
        raise ValidationError(
            "Invalid entity id",
            errors=[{"field": param, "message": "Expected a positive integer"}],
        )
    return int(raw)


def parse_entity_ids(raw: str | None, param: str) -> list[int]:
    """Parse a comma-joined list of positive integer ids.

    Duplicates are dropped; the result is sorted.

    Raises:
        ValidationError: If the list is empty, malformed or too long
    """
    if raw is None or not _ID_LIST_PATTERN.fullmatch(raw):
        raise ValidationError(
            "Invalid entity id list",
            errors=[
                {"field": param, "message": "Expected comma-separated positive integers"}
            ],
        )
    ids = sorted({int(part) for part in raw.split(",")})
    if len(ids) > MAX_BATCH_IDS:
        raise ValidationError(
            "Too many entity ids",
            errors=[
                {"field": param, "message": f"At most {MAX_BATCH_IDS} ids are allowed"}
            ],
        )
    return ids


class _Authorization:
    """Shared configuration for the authorization dependencies."""

    def __init__(self, entity_set: EntitySet, permission_type: PermissionType) -> None:
        self.entity_set = entity_set
        self.permission_type = permission_type

    def _deny(self, user_id: int, **context: object) -> AuthorizationError:
        logger.info(
            "access_denied",
            user_id=user_id,
            entity_set=str(self.entity_set),
            permission_type=str(self.permission_type),
            **context,
        )
        return AuthorizationError(
            "You do not have permission to perform this action",
            error_code="permission_denied",
            details={
                "entity_set": str(self.entity_set),
                "permission_type": str(self.permission_type),
            },
        )

    async def _has_set_access(
        self, user_id: int, resolver: AuthorizationResolver
    ) -> bool:
        return await resolver.check_access(
            user_id, self.entity_set, self.permission_type, SET_LEVEL
        )

    @staticmethod
    def _attach(request: Request, access: AccessScope) -> AccessScope:
        request.state.access = access
        return access

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.entity_set}, {self.permission_type})"


class EntitySetAuthorization(_Authorization):
    """Require the set-level grant, e.g. to create entities in the set."""

    async def __call__(
        self,
        request: Request,
        user: CurrentUser,
        resolver: Resolver,
    ) -> AccessScope:
        if not await self._has_set_access(user.id, resolver):
            raise self._deny(user.id, scope="set")
        return self._attach(request, AccessScope(has_set_access=True))


class EntityAuthorization(_Authorization):
    """Require access to the single entity named by a path parameter.

    Args:
        entity_set: The entity set the route operates on
        permission_type: The action the route performs
        param: Name of the path parameter holding the entity id
    """

    def __init__(
        self,
        entity_set: EntitySet,
        permission_type: PermissionType,
        param: str = "id",
    ) -> None:
        super().__init__(entity_set, permission_type)
        self.param = param

    async def __call__(
        self,
        request: Request,
        user: CurrentUser,
        resolver: Resolver,
    ) -> AccessScope:
        entity_id = parse_entity_id(request.path_params.get(self.param), self.param)
        set_access = await self._has_set_access(user.id, resolver)
        if not set_access and not await resolver.check_access(
            user.id, self.entity_set, self.permission_type, Instance(entity_id)
        ):
            raise self._deny(user.id, entity=entity_id)
        return self._attach(
            request,
            AccessScope(has_set_access=set_access, accessible_entities=[entity_id]),
        )


class EntitiesAuthorization(_Authorization):
    """Require access to every entity in a comma-joined path parameter.

    Args:
        entity_set: The entity set the route operates on
        permission_type: The action the route performs
        param: Name of the path parameter holding the id list
    """

    def __init__(
        self,
        entity_set: EntitySet,
        permission_type: PermissionType,
        param: str = "ids",
    ) -> None:
        super().__init__(entity_set, permission_type)
        self.param = param

    async def __call__(
        self,
        request: Request,
        user: CurrentUser,
        resolver: Resolver,
    ) -> AccessScope:
        entity_ids = parse_entity_ids(request.path_params.get(self.param), self.param)
        set_access = await self._has_set_access(user.id, resolver)
        if not set_access and not await resolver.check_access_many(
            user.id, self.entity_set, self.permission_type, entity_ids
        ):
            raise self._deny(user.id, entities=entity_ids)
        return self._attach(
            request,
            AccessScope(has_set_access=set_access, accessible_entities=entity_ids),
        )


class AccessibleEntitiesAuthorization(_Authorization):
    """Enumerate the entities the user may act on, for listing routes.

    Denies when the user has neither the set-level grant nor any
    instance grant.
    """

    async def __call__(
        self,
        request: Request,
        user: CurrentUser,
        resolver: Resolver,
    ) -> AccessScope:
        scopes = await resolver.find_accessible_entities(
            user.id, self.entity_set, self.permission_type
        )
        if not scopes:
            raise self._deny(user.id, scope="any")
        return self._attach(request, AccessScope.from_scopes(scopes))
