"""Unit tests for the authorization dependencies.

The resolver is mocked; these tests cover id parsing, the calls made to
the resolver and the access scope attached to the request.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, call

import pytest

from gatehouse.core.constants import MAX_BATCH_IDS
from gatehouse.core.errors import AuthorizationError, ValidationError
from gatehouse.core.permissions.dependencies import (
    AccessibleEntitiesAuthorization,
    EntitiesAuthorization,
    EntityAuthorization,
    EntitySetAuthorization,
    parse_entity_id,
    parse_entity_ids,
)
from gatehouse.core.permissions.types import (
    SET_LEVEL,
    EntitySet,
    Instance,
    PermissionType,
)


pytestmark = pytest.mark.unit

ITEM = EntitySet.ITEM
READ = PermissionType.READ


def make_request(**path_params: str) -> SimpleNamespace:
    return SimpleNamespace(path_params=path_params, state=SimpleNamespace())


@pytest.fixture
def caller() -> SimpleNamespace:
    return SimpleNamespace(id=5)


@pytest.fixture
def resolver() -> AsyncMock:
    return AsyncMock()


class TestParseEntityId:
    """Tests for parse_entity_id."""

    def test_valid_id(self):
        assert parse_entity_id("42", "id") == 42

    @pytest.mark.parametrize("raw", [None, "", "0", "-1", "01", "1.5", "abc", " 7", "7\n", "١٢"])
    def test_rejects_invalid_values(self, raw):
        """Only plain ASCII positive integers are accepted."""
        with pytest.raises(ValidationError) as exc_info:
            parse_entity_id(raw, "item_id")

        assert exc_info.value.details["errors"][0]["field"] == "item_id"


class TestParseEntityIds:
    """Tests for parse_entity_ids."""

    def test_sorts_and_deduplicates(self):
        assert parse_entity_ids("8,7,8", "ids") == [7, 8]

    def test_single_id(self):
        assert parse_entity_ids("3", "ids") == [3]

    @pytest.mark.parametrize("raw", [None, "", ",", "1,", ",1", "1,,2", "1,a", "1, 2", "0,1"])
    def test_rejects_malformed_lists(self, raw):
        with pytest.raises(ValidationError):
            parse_entity_ids(raw, "ids")

    def test_upper_bound(self):
        """The id count is bounded after duplicates are dropped."""
        at_limit = ",".join(str(i) for i in range(1, MAX_BATCH_IDS + 1))
        assert len(parse_entity_ids(at_limit, "ids")) == MAX_BATCH_IDS

        over_limit = ",".join(str(i) for i in range(1, MAX_BATCH_IDS + 2))
        with pytest.raises(ValidationError):
            parse_entity_ids(over_limit, "ids")


class TestEntitySetAuthorization:
    """Tests for EntitySetAuthorization."""

    async def test_allows_with_set_level_grant(self, caller, resolver):
        resolver.check_access.return_value = True
        request = make_request()

        access = await EntitySetAuthorization(ITEM, PermissionType.CREATE)(
            request, caller, resolver
        )

        resolver.check_access.assert_awaited_once_with(
            5, ITEM, PermissionType.CREATE, SET_LEVEL
        )
        assert access.has_set_access
        assert request.state.access is access

    async def test_denies_without_grant(self, caller, resolver):
        resolver.check_access.return_value = False

        with pytest.raises(AuthorizationError) as exc_info:
            await EntitySetAuthorization(ITEM, PermissionType.CREATE)(
                make_request(), caller, resolver
            )

        assert exc_info.value.error_code == "permission_denied"
        assert exc_info.value.details == {
            "entity_set": "item",
            "permission_type": "create",
        }


class TestEntityAuthorization:
    """Tests for EntityAuthorization."""

    async def test_checks_the_path_entity(self, caller, resolver):
        resolver.check_access.side_effect = [False, True]
        request = make_request(item_id="42")

        access = await EntityAuthorization(ITEM, READ, param="item_id")(
            request, caller, resolver
        )

        assert resolver.check_access.await_args_list == [
            call(5, ITEM, READ, SET_LEVEL),
            call(5, ITEM, READ, Instance(42)),
        ]
        assert not access.has_set_access
        assert access.accessible_entities == [42]
        assert request.state.access is access

    async def test_reports_set_level_grant(self, caller, resolver):
        resolver.check_access.return_value = True

        access = await EntityAuthorization(ITEM, READ)(
            make_request(id="42"), caller, resolver
        )

        resolver.check_access.assert_awaited_once_with(5, ITEM, READ, SET_LEVEL)
        assert access.has_set_access
        assert access.accessible_entities == [42]

    async def test_denies_without_grant(self, caller, resolver):
        resolver.check_access.return_value = False

        with pytest.raises(AuthorizationError):
            await EntityAuthorization(ITEM, READ)(
                make_request(id="42"), caller, resolver
            )

    async def test_malformed_id_never_reaches_resolver(self, caller, resolver):
        with pytest.raises(ValidationError):
            await EntityAuthorization(ITEM, READ)(
                make_request(id="4x"), caller, resolver
            )

        resolver.check_access.assert_not_awaited()


class TestEntitiesAuthorization:
    """Tests for EntitiesAuthorization."""

    async def test_checks_the_whole_batch(self, caller, resolver):
        resolver.check_access.return_value = False
        resolver.check_access_many.return_value = True
        request = make_request(ids="8,7")

        access = await EntitiesAuthorization(ITEM, READ)(request, caller, resolver)

        resolver.check_access_many.assert_awaited_once_with(5, ITEM, READ, [7, 8])
        assert not access.has_set_access
        assert access.accessible_entities == [7, 8]

    async def test_set_level_grant_covers_the_batch(self, caller, resolver):
        resolver.check_access.return_value = True

        access = await EntitiesAuthorization(ITEM, READ)(
            make_request(ids="7,8"), caller, resolver
        )

        resolver.check_access_many.assert_not_awaited()
        assert access.has_set_access
        assert access.accessible_entities == [7, 8]

    async def test_denies_when_any_entity_is_missing(self, caller, resolver):
        resolver.check_access.return_value = False
        resolver.check_access_many.return_value = False

        with pytest.raises(AuthorizationError):
            await EntitiesAuthorization(ITEM, READ)(
                make_request(ids="7,8"), caller, resolver
            )

    async def test_empty_list_is_rejected(self, caller, resolver):
        with pytest.raises(ValidationError):
            await EntitiesAuthorization(ITEM, READ)(
                make_request(ids=""), caller, resolver
            )

        resolver.check_access_many.assert_not_awaited()


class TestAccessibleEntitiesAuthorization:
    """Tests for AccessibleEntitiesAuthorization."""

    async def test_set_level_scope(self, caller, resolver):
        resolver.find_accessible_entities.return_value = [SET_LEVEL, Instance(3)]

        access = await AccessibleEntitiesAuthorization(ITEM, READ)(
            make_request(), caller, resolver
        )

        assert access.has_set_access
        assert access.accessible_entities is None
        assert access.permits(999)

    async def test_instance_scope(self, caller, resolver):
        resolver.find_accessible_entities.return_value = [Instance(3), Instance(9)]

        access = await AccessibleEntitiesAuthorization(ITEM, READ)(
            make_request(), caller, resolver
        )

        assert not access.has_set_access
        assert access.accessible_entities == [3, 9]
        assert not access.permits(4)

    async def test_denies_when_nothing_is_accessible(self, caller, resolver):
        resolver.find_accessible_entities.return_value = []

        with pytest.raises(AuthorizationError):
            await AccessibleEntitiesAuthorization(ITEM, READ)(
                make_request(), caller, resolver
            )
