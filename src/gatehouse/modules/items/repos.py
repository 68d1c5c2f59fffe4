"""Item repository for database operations."""

from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends
from sqlalchemy import select

from gatehouse.api.dependencies import DBSession
from gatehouse.modules.items.models import Item


class ItemRepository:
    """Repository for Item database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, item: Item) -> Item:
        """Create a new item and populate its ID."""
        self.session.add(item)
        await self.session.flush()
        return item

    async def get_by_id(self, item_id: int) -> Item | None:
        """Get an item by ID."""
        return await self.session.get(Item, item_id)

    async def find_all(self, item_ids: Sequence[int] | None = None) -> list[Item]:
        """List items ordered by ID, restricted to ``item_ids`` when given."""
        stmt = select(Item).order_by(Item.id)
        if item_ids is not None:
            stmt = stmt.where(Item.id.in_(sorted(set(item_ids))))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, item: Item) -> None:
        """Delete an item."""
        await self.session.delete(item)
        await self.session.flush()


# Type alias for dependency injection
ItemRepo = Annotated[ItemRepository, Depends(ItemRepository)]
