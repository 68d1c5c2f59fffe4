"""Value types shared by the permission catalog, stores and resolver.

A permission is identified by ``(entity_set, permission_type, scope)``.
The scope is either the whole entity set or a single instance of it;
storage encodes the set-level scope as a NULL ``entity`` column, and
:func:`scope_of` / :attr:`Instance.entity` convert between the two.
"""

from collections.abc import Collection
from dataclasses import dataclass, field
from enum import StrEnum


class EntitySet(StrEnum):
    """Resource types that permissions can be granted on."""

    ITEM = "item"
    PERMISSION = "permission"
    ROLE = "role"
    ROLE_PERMISSION = "role_permission"
    USER = "user"
    USER_PERMISSION = "user_permission"
    USER_ROLE = "user_role"


class PermissionType(StrEnum):
    """Actions a permission allows."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    SHARE = "share"


# Creating an existing instance is meaningless, so instances never get CREATE.
INSTANCE_PERMISSION_TYPES: tuple[PermissionType, ...] = (
    PermissionType.READ,
    PermissionType.UPDATE,
    PermissionType.DELETE,
    PermissionType.SHARE,
)

SET_PERMISSION_TYPES: tuple[PermissionType, ...] = tuple(PermissionType)


def ordered_types(types: Collection[PermissionType]) -> list[PermissionType]:
    """Return permission types in declaration order."""
    return [t for t in PermissionType if t in types]


@dataclass(frozen=True, slots=True)
class SetLevel:
    """Scope covering every entity in a set."""

    @property
    def entity(self) -> None:
        return None

    def __str__(self) -> str:
        return "*"


@dataclass(frozen=True, slots=True)
class Instance:
    """Scope covering one entity, identified by its integer id."""

    id: int

    @property
    def entity(self) -> int:
        return self.id

    def __str__(self) -> str:
        return str(self.id)


Scope = SetLevel | Instance

SET_LEVEL = SetLevel()


def scope_of(entity: int | None) -> Scope:
    """Build a scope from a stored ``entity`` column value."""
    return SET_LEVEL if entity is None else Instance(entity)


@dataclass(slots=True)
class AccessScope:
    """Result of an authorization check attached to the request.

    Handlers branch on ``has_set_access`` to return every row, or
    restrict themselves to ``accessible_entities`` otherwise.

    Attributes:
        has_set_access: The user holds the set-level grant
        accessible_entities: For enumeration, the ids reachable through
            instance grants, or ``None`` when set access makes the user
            unrestricted. For checks on named entities, the ids checked.
    """

    has_set_access: bool
    accessible_entities: list[int] | None = field(default=None)

    @classmethod
    def from_scopes(cls, scopes: list[Scope]) -> "AccessScope":
        """Collapse resolver enumeration output into an access scope."""
        if SET_LEVEL in scopes:
            return cls(has_set_access=True)
        return cls(
            has_set_access=False,
            accessible_entities=sorted(s.id for s in scopes if isinstance(s, Instance)),
        )

    def permits(self, entity_id: int) -> bool:
        """Whether a single entity falls inside this scope."""
        if self.has_set_access:
            return True
        return entity_id in (self.accessible_entities or [])
