"""Mapping from entity sets to the tables that store their instances."""

from types import MappingProxyType

from sqlalchemy import Table

from gatehouse.core.database.base import Base
from gatehouse.core.permissions.types import EntitySet


# Only integer-keyed tables can carry instance-level permissions.
# Join tables use composite keys and are governed at set level.
INSTANCE_TABLES: MappingProxyType[EntitySet, str] = MappingProxyType(
    {
        EntitySet.ITEM: "items",
        EntitySet.ROLE: "roles",
        EntitySet.USER: "users",
    }
)


def supports_instances(entity_set: EntitySet) -> bool:
    """Whether permissions on this set may be scoped to single entities."""
    return entity_set in INSTANCE_TABLES


def instance_table(entity_set: EntitySet) -> Table | None:
    """Return the table holding instances of ``entity_set``.

    Returns:
        The mapped table, or None for sets without instances
    """
    name = INSTANCE_TABLES.get(entity_set)
    if name is None:
        return None
    return Base.metadata.tables[name]
