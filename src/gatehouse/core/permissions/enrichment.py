"""Attach the caller's permission types to API responses.

Clients pass ``?authorization=true`` to learn which actions they may take
on each returned entity and on the entity set, e.g. to show or hide
buttons. The types come from the resolver; they advertise, they do not gate.
"""

from typing import Annotated, Any, TypeVar

from fastapi import Query

from gatehouse.core.permissions.resolver import AuthorizationResolver, effective_types
from gatehouse.core.permissions.schemas import AuthorizedModel
from gatehouse.core.permissions.types import SET_LEVEL, EntitySet


ModelT = TypeVar("ModelT", bound=AuthorizedModel)

IncludeAuthorization = Annotated[
    bool,
    Query(
        alias="authorization",
        description="Include the caller's permission types in the response",
    ),
]


async def include_authorization(
    resolver: AuthorizationResolver,
    user_id: int,
    entity_set: EntitySet,
    items: list[ModelT],
) -> tuple[list[ModelT], dict[str, Any]]:
    """Add each item's effective permission types.

    Args:
        resolver: Resolver bound to the request session
        user_id: The caller
        entity_set: The set the items belong to
        items: Response models with an integer ``id``

    Returns:
        The enriched items and envelope metadata holding the set-level types
    """
    types_by_scope = await resolver.find_permission_types_for_entities(
        user_id, entity_set, [item.id for item in items]
    )
    enriched = [
        item.model_copy(
            update={"authorization": effective_types(types_by_scope, item.id)}
        )
        for item in items
    ]
    return enriched, {"authorization": types_by_scope[SET_LEVEL]}


async def include_set_authorization(
    resolver: AuthorizationResolver,
    user_id: int,
    entity_set: EntitySet,
) -> dict[str, Any]:
    """Build envelope metadata holding the caller's set-level types."""
    types = await resolver.find_permission_types_for_entity(
        user_id, entity_set, SET_LEVEL
    )
    return {"authorization": types}
