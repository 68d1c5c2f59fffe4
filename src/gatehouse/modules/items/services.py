"""Item service for business logic."""

from typing import Annotated

import structlog
from fastapi import Depends

from gatehouse.api.dependencies import DBSession
from gatehouse.core.errors import NotFoundError
from gatehouse.core.permissions.catalog import PermissionCatalog
from gatehouse.core.permissions.grants import UserPermissionRepository
from gatehouse.core.permissions.types import EntitySet
from gatehouse.modules.items.models import Item
from gatehouse.modules.items.repos import ItemRepository
from gatehouse.modules.items.schemas import ItemCreate, ItemUpdate


logger = structlog.get_logger()


class ItemService:
    """Service for item operations.

    The creator of an item owns it: every instance permission on the new
    item is granted to them directly.
    """

    def __init__(self, db: DBSession) -> None:
        self.repo = ItemRepository(db)
        self.catalog = PermissionCatalog(db)
        self.user_permissions = UserPermissionRepository(db)

    async def create_item(self, data: ItemCreate, owner_id: int) -> Item:
        """Create an item and provision its permissions."""
        item = await self.repo.create(
            Item(name=data.name, description=data.description, owner_id=owner_id)
        )

        permissions = await self.catalog.generate_entity_permissions(
            EntitySet.ITEM, item.id
        )
        await self.user_permissions.grant_all(owner_id, permissions)

        logger.info("item_created", item_id=item.id, owner_id=owner_id)
        return item

    async def get_item(self, item_id: int) -> Item:
        """Get an item by ID.

        Raises:
            NotFoundError: If item not found
        """
        item = await self.repo.get_by_id(item_id)
        if not item:
            raise NotFoundError("Item not found", resource="item", resource_id=item_id)
        return item

    async def list_items(self, item_ids: list[int] | None = None) -> list[Item]:
        """List items, restricted to ``item_ids`` when given."""
        return await self.repo.find_all(item_ids)

    async def update_item(self, item_id: int, data: ItemUpdate) -> Item:
        """Apply a partial update to an item.

        Raises:
            NotFoundError: If item not found
        """
        item = await self.get_item(item_id)
        changes = data.model_dump(exclude_unset=True)
        # name is required; an explicit null leaves it unchanged
        if changes.get("name") is None:
            changes.pop("name", None)
        for field, value in changes.items():
            setattr(item, field, value)
        await self.repo.session.flush()
        return item

    async def delete_item(self, item_id: int) -> None:
        """Delete an item and its instance permissions.

        Raises:
            NotFoundError: If item not found
        """
        item = await self.get_item(item_id)
        await self.catalog.delete_entity_permissions(EntitySet.ITEM, item_id)
        await self.repo.delete(item)
        logger.info("item_deleted", item_id=item_id)


# Type alias for dependency injection
ItemSvc = Annotated[ItemService, Depends(ItemService)]
