"""Item factory for tests."""

from uuid import uuid4

from polyfactory.factories.sqlalchemy_factory import SQLAlchemyFactory

from gatehouse.modules.items.models import Item


class ItemFactory(SQLAlchemyFactory[Item]):
    """Factory for creating test Item instances."""

    __model__ = Item
    __set_primary_key__ = False
    __set_relationships__ = False

    @classmethod
    def name(cls) -> str:
        """Generate an item name."""
        return f"Item {uuid4().hex[:6]}"

    @classmethod
    def description(cls) -> str | None:
        """Items have no description unless a test sets one."""
        return None

    @classmethod
    def owner_id(cls) -> int | None:
        """Unowned unless a test passes an owner."""
        return None
