"""Integration tests for user endpoints."""

import pytest
from httpx import AsyncClient

from gatehouse.core.permissions.types import EntitySet, Instance, PermissionType


pytestmark = pytest.mark.integration

USER = EntitySet.USER
READ = PermissionType.READ


class TestCurrentUser:
    """Tests for /users/me."""

    async def test_get_me(self, client: AsyncClient, user, auth_headers):
        response = await client.get("/api/v1/users/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["email"] == user.email

    async def test_get_my_authorization(
        self, client: AsyncClient, user, auth_headers, grant
    ):
        await grant(user, EntitySet.ROLE, READ)
        await grant(user, USER, READ, Instance(user.id))

        response = await client.get(
            "/api/v1/users/me/authorization", headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json() == {"set_level": ["role"], "instance_level": ["user"]}

    async def test_empty_authorization(self, client: AsyncClient, auth_headers):
        response = await client.get(
            "/api/v1/users/me/authorization", headers=auth_headers
        )

        assert response.json() == {"set_level": [], "instance_level": []}


class TestListUsers:
    """Tests for GET /users."""

    async def test_denied_without_any_grant(self, client: AsyncClient, auth_headers):
        response = await client.get("/api/v1/users", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["type"].endswith("/errors/permission_denied")

    async def test_instance_grants_restrict_the_list(
        self, client: AsyncClient, user, auth_headers, create_user, grant
    ):
        other = await create_user()
        await create_user()
        await grant(user, USER, READ, Instance(user.id))
        await grant(user, USER, READ, Instance(other.id))

        response = await client.get("/api/v1/users", headers=auth_headers)

        assert response.status_code == 200
        assert sorted(u["id"] for u in response.json()["data"]) == sorted(
            [user.id, other.id]
        )

    async def test_set_level_grant_lists_everyone(
        self, client: AsyncClient, user, auth_headers, create_user, grant
    ):
        await create_user()
        await create_user()
        await grant(user, USER, READ)

        response = await client.get("/api/v1/users", headers=auth_headers)

        assert len(response.json()["data"]) == 3


class TestGetAndUpdateUser:
    """Tests for GET and PATCH /users/{user_id}."""

    async def test_other_user_is_forbidden(
        self, client: AsyncClient, auth_headers, create_user
    ):
        other = await create_user()

        response = await client.get(f"/api/v1/users/{other.id}", headers=auth_headers)

        assert response.status_code == 403

    async def test_malformed_id(self, client: AsyncClient, auth_headers):
        response = await client.get("/api/v1/users/abc", headers=auth_headers)

        assert response.status_code == 422

    async def test_update_with_grant(
        self, client: AsyncClient, user, auth_headers, grant
    ):
        await grant(user, USER, PermissionType.UPDATE, Instance(user.id))

        response = await client.patch(
            f"/api/v1/users/{user.id}", json={"name": "Renamed"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Renamed"

    async def test_update_needs_update_grant(
        self, client: AsyncClient, user, auth_headers, grant
    ):
        """Read access alone does not allow updates."""
        await grant(user, USER, READ, Instance(user.id))

        response = await client.patch(
            f"/api/v1/users/{user.id}", json={"name": "Renamed"}, headers=auth_headers
        )

        assert response.status_code == 403

    async def test_update_to_taken_email(
        self, client: AsyncClient, user, auth_headers, create_user, grant
    ):
        other = await create_user()
        await grant(user, USER, PermissionType.UPDATE, Instance(user.id))

        response = await client.patch(
            f"/api/v1/users/{user.id}", json={"email": other.email}, headers=auth_headers
        )

        assert response.status_code == 409
