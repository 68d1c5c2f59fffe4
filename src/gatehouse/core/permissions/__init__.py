"""Access control: permission catalog, grant stores and the resolver."""

from gatehouse.core.permissions.types import (
    INSTANCE_PERMISSION_TYPES,
    SET_LEVEL,
    AccessScope,
    EntitySet,
    Instance,
    PermissionType,
    Scope,
    SetLevel,
    scope_of,
)


__all__ = [
    "INSTANCE_PERMISSION_TYPES",
    "SET_LEVEL",
    "AccessScope",
    "EntitySet",
    "Instance",
    "PermissionType",
    "Scope",
    "SetLevel",
    "scope_of",
]
