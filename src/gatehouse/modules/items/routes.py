"""Item API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from gatehouse.api.schemas import Envelope
from gatehouse.core.auth.dependencies import CurrentUser
from gatehouse.core.permissions.dependencies import (
    AccessibleEntitiesAuthorization,
    EntitiesAuthorization,
    EntityAuthorization,
    EntitySetAuthorization,
)
from gatehouse.core.permissions.enrichment import (
    IncludeAuthorization,
    include_authorization,
    include_set_authorization,
)
from gatehouse.core.permissions.resolver import Resolver
from gatehouse.core.permissions.types import AccessScope, EntitySet, PermissionType
from gatehouse.modules.items.schemas import ItemCreate, ItemResponse, ItemUpdate
from gatehouse.modules.items.services import ItemSvc


router = APIRouter(prefix="/items", tags=["items"])

list_items_access = AccessibleEntitiesAuthorization(EntitySet.ITEM, PermissionType.READ)
create_items = EntitySetAuthorization(EntitySet.ITEM, PermissionType.CREATE)
read_items_batch = EntitiesAuthorization(EntitySet.ITEM, PermissionType.READ)
read_item = EntityAuthorization(EntitySet.ITEM, PermissionType.READ, param="item_id")
update_item_access = EntityAuthorization(
    EntitySet.ITEM, PermissionType.UPDATE, param="item_id"
)
delete_item_access = EntityAuthorization(
    EntitySet.ITEM, PermissionType.DELETE, param="item_id"
)


@router.get(
    "",
    response_model=Envelope[list[ItemResponse]],
    summary="List items",
    description="Lists every item the caller may read.",
)
async def list_items(
    access: Annotated[AccessScope, Depends(list_items_access)],
    current_user: CurrentUser,
    service: ItemSvc,
    resolver: Resolver,
    authorization: IncludeAuthorization = False,
) -> Envelope[list[ItemResponse]]:
    """List readable items."""
    item_ids = None if access.has_set_access else access.accessible_entities
    items = [ItemResponse.model_validate(i) for i in await service.list_items(item_ids)]

    if not authorization:
        return Envelope(data=items)

    items, metadata = await include_authorization(
        resolver, current_user.id, EntitySet.ITEM, items
    )
    return Envelope(data=items, metadata=metadata)


@router.post(
    "",
    response_model=Envelope[ItemResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(create_items)],
    summary="Create item",
    description="Creates an item owned by the caller.",
)
async def create_item(
    data: ItemCreate,
    current_user: CurrentUser,
    service: ItemSvc,
    resolver: Resolver,
    authorization: IncludeAuthorization = False,
) -> Envelope[ItemResponse]:
    """Create an item."""
    item = ItemResponse.model_validate(
        await service.create_item(data, owner_id=current_user.id)
    )

    if not authorization:
        return Envelope(data=item)

    metadata = await include_set_authorization(resolver, current_user.id, EntitySet.ITEM)
    return Envelope(data=item, metadata=metadata)


@router.get(
    "/batch/{ids}",
    response_model=Envelope[list[ItemResponse]],
    summary="Get items by IDs",
    description="Comma-separated item IDs; the caller must be able to read all of them.",
)
async def get_items_batch(
    access: Annotated[AccessScope, Depends(read_items_batch)],
    current_user: CurrentUser,
    service: ItemSvc,
    resolver: Resolver,
    authorization: IncludeAuthorization = False,
) -> Envelope[list[ItemResponse]]:
    """Get several items at once."""
    items = [
        ItemResponse.model_validate(i)
        for i in await service.list_items(access.accessible_entities)
    ]

    if not authorization:
        return Envelope(data=items)

    items, metadata = await include_authorization(
        resolver, current_user.id, EntitySet.ITEM, items
    )
    return Envelope(data=items, metadata=metadata)


@router.get(
    "/{item_id}",
    response_model=Envelope[ItemResponse],
    dependencies=[Depends(read_item)],
    summary="Get item",
)
async def get_item(
    item_id: int,
    current_user: CurrentUser,
    service: ItemSvc,
    resolver: Resolver,
    authorization: IncludeAuthorization = False,
) -> Envelope[ItemResponse]:
    """Get a single item."""
    item = ItemResponse.model_validate(await service.get_item(item_id))

    if not authorization:
        return Envelope(data=item)

    [item], metadata = await include_authorization(
        resolver, current_user.id, EntitySet.ITEM, [item]
    )
    return Envelope(data=item, metadata=metadata)


@router.patch(
    "/{item_id}",
    response_model=Envelope[ItemResponse],
    dependencies=[Depends(update_item_access)],
    summary="Update item",
)
async def update_item(
    item_id: int,
    data: ItemUpdate,
    service: ItemSvc,
) -> Envelope[ItemResponse]:
    """Update an item."""
    item = await service.update_item(item_id, data)
    return Envelope(data=ItemResponse.model_validate(item))


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(delete_item_access)],
    summary="Delete item",
    description="Deletes an item together with its instance permissions and their grants.",
)
async def delete_item(item_id: int, service: ItemSvc) -> None:
    """Delete an item."""
    await service.delete_item(item_id)
