"""Unit tests for permission value types."""

import pytest

from gatehouse.core.permissions.resolver import effective_types
from gatehouse.core.permissions.types import (
    INSTANCE_PERMISSION_TYPES,
    SET_LEVEL,
    AccessScope,
    Instance,
    PermissionType,
    SetLevel,
    ordered_types,
    scope_of,
)


pytestmark = pytest.mark.unit


class TestScope:
    """Tests for SetLevel / Instance scopes."""

    def test_scope_of_none_is_set_level(self):
        """A NULL entity column maps to the set-level scope."""
        assert scope_of(None) == SET_LEVEL
        assert isinstance(scope_of(None), SetLevel)

    def test_scope_of_id_is_instance(self):
        """An entity id maps to an instance scope."""
        assert scope_of(7) == Instance(7)

    def test_entity_round_trips_to_column_value(self):
        """Scopes expose the value stored in the entity column."""
        assert SET_LEVEL.entity is None
        assert Instance(42).entity == 42

    def test_scopes_are_hashable(self):
        """Scopes can be used as mapping keys."""
        mapping = {SET_LEVEL: "all", Instance(1): "one"}
        assert mapping[SetLevel()] == "all"
        assert mapping[Instance(1)] == "one"

    def test_str(self):
        """Scopes render readably in logs."""
        assert str(SET_LEVEL) == "*"
        assert str(Instance(3)) == "3"


class TestOrderedTypes:
    """Tests for ordered_types."""

    def test_declaration_order_and_dedup(self):
        """Types come back once each, in declaration order."""
        types = [PermissionType.SHARE, PermissionType.READ, PermissionType.READ]
        assert ordered_types(types) == [PermissionType.READ, PermissionType.SHARE]

    def test_instance_types_exclude_create(self):
        """Create only exists at set level."""
        assert PermissionType.CREATE not in INSTANCE_PERMISSION_TYPES
        assert len(INSTANCE_PERMISSION_TYPES) == 4


class TestEffectiveTypes:
    """Tests for combining set-level and instance types."""

    def test_union_of_set_and_instance(self):
        """An entity's types include the blanket set-level types."""
        types_by_scope = {
            SET_LEVEL: [PermissionType.READ],
            Instance(7): [PermissionType.UPDATE, PermissionType.READ],
        }
        assert effective_types(types_by_scope, 7) == [
            PermissionType.READ,
            PermissionType.UPDATE,
        ]

    def test_entity_without_instance_grants(self):
        """Entities absent from the map only get the set-level types."""
        types_by_scope = {SET_LEVEL: [PermissionType.DELETE]}
        assert effective_types(types_by_scope, 8) == [PermissionType.DELETE]

    def test_nothing_granted(self):
        """No grants at all yields an empty list."""
        assert effective_types({SET_LEVEL: []}, 1) == []


class TestAccessScope:
    """Tests for AccessScope."""

    def test_from_scopes_with_wildcard(self):
        """A set-level scope leaves the user unrestricted."""
        access = AccessScope.from_scopes([SET_LEVEL, Instance(2), Instance(5)])
        assert access.has_set_access is True
        assert access.accessible_entities is None
        assert access.permits(7)

    def test_from_scopes_instances_only(self):
        """Without set-level scope only the listed ids are accessible."""
        access = AccessScope.from_scopes([Instance(9), Instance(1)])
        assert access.has_set_access is False
        assert access.accessible_entities == [1, 9]

    def test_permits(self):
        """permits honours both set access and the allow-list."""
        assert AccessScope(has_set_access=True).permits(100)
        scoped = AccessScope(has_set_access=False, accessible_entities=[3])
        assert scoped.permits(3)
        assert not scoped.permits(4)
        assert not AccessScope(has_set_access=False).permits(1)
