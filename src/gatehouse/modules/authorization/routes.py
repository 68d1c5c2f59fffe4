"""Authorization query routes.

These report what the calling user may do. They never deny: an empty
result is the answer, not an error.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from gatehouse.core.auth.dependencies import CurrentUser
from gatehouse.core.permissions.dependencies import parse_entity_ids
from gatehouse.core.permissions.resolver import Resolver
from gatehouse.core.permissions.schemas import (
    AccessDecisionResponse,
    AccessScopeResponse,
    PermissionTypesResponse,
)
from gatehouse.core.permissions.types import (
    SET_LEVEL,
    EntitySet,
    Instance,
    PermissionType,
    scope_of,
)


router = APIRouter(prefix="/authorization", tags=["authorization"])


@router.get(
    "/{entity_set}",
    response_model=PermissionTypesResponse,
    summary="Permission types on a set or entity",
    description="Types the caller holds on the set, or on one entity when `entity` is given.",
)
async def get_permission_types(
    entity_set: EntitySet,
    current_user: CurrentUser,
    resolver: Resolver,
    entity: Annotated[int | None, Query(ge=1)] = None,
) -> PermissionTypesResponse:
    """List the caller's permission types."""
    types = await resolver.find_permission_types_for_entity(
        current_user.id, entity_set, scope_of(entity)
    )
    return PermissionTypesResponse(
        entity_set=entity_set,
        entity=entity,
        permission_types=types,
    )


@router.get(
    "/{entity_set}/{permission_type}/entities",
    response_model=AccessScopeResponse,
    summary="Accessible entities",
    description="Whether the caller has set-level access, and which entities they may act on otherwise.",
)
async def get_accessible_entities(
    entity_set: EntitySet,
    permission_type: PermissionType,
    current_user: CurrentUser,
    resolver: Resolver,
) -> AccessScopeResponse:
    """Enumerate what the caller may act on."""
    scopes = await resolver.find_accessible_entities(
        current_user.id, entity_set, permission_type
    )
    return AccessScopeResponse(
        entity_set=entity_set,
        permission_type=permission_type,
        has_set_access=SET_LEVEL in scopes,
        accessible_entities=[s.id for s in scopes if isinstance(s, Instance)],
    )


@router.get(
    "/{entity_set}/{permission_type}/check",
    response_model=AccessDecisionResponse,
    summary="Check access",
    description=(
        "Checks the set-level grant, or every one of the comma-separated "
        "`entities` (all or nothing)."
    ),
)
async def check_access(
    entity_set: EntitySet,
    permission_type: PermissionType,
    current_user: CurrentUser,
    resolver: Resolver,
    entities: str | None = None,
) -> AccessDecisionResponse:
    """Decide access for the caller."""
    if entities is None:
        granted = await resolver.check_access(current_user.id, entity_set, permission_type)
        return AccessDecisionResponse(
            entity_set=entity_set,
            permission_type=permission_type,
            granted=granted,
        )

    entity_ids = parse_entity_ids(entities, "entities")
    granted = await resolver.check_access_many(
        current_user.id, entity_set, permission_type, entity_ids
    )
    return AccessDecisionResponse(
        entity_set=entity_set,
        permission_type=permission_type,
        entities=entity_ids,
        granted=granted,
    )
