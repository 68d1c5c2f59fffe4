"""Integration tests for grant and membership endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from gatehouse.core.permissions.catalog import PermissionCatalog
from gatehouse.core.permissions.models import Permission, Role
from gatehouse.core.permissions.resolver import AuthorizationResolver
from gatehouse.core.permissions.types import EntitySet, Instance, PermissionType
from tests.factories import RoleFactory


pytestmark = pytest.mark.integration

READ = PermissionType.READ
CREATE = PermissionType.CREATE
DELETE = PermissionType.DELETE


@pytest.fixture
async def role(db: AsyncSession) -> Role:
    role = RoleFactory.build(name="admin")
    db.add(role)
    await db.flush()
    return role


@pytest.fixture
async def item_read(db: AsyncSession) -> Permission:
    return await PermissionCatalog(db).create(EntitySet.ITEM, READ)


class TestRolePermissions:
    """Tests for /role-permissions."""

    async def test_grant_requires_set_level_create(
        self, client: AsyncClient, auth_headers, role, item_read
    ):
        response = await client.post(
            "/api/v1/role-permissions",
            json={"role_id": role.id, "permission_id": item_read.id},
            headers=auth_headers,
        )

        assert response.status_code == 403

    async def test_grant_list_and_revoke(
        self, client: AsyncClient, user, auth_headers, grant, role, item_read
    ):
        for permission_type in (READ, CREATE, DELETE):
            await grant(user, EntitySet.ROLE_PERMISSION, permission_type)

        response = await client.post(
            "/api/v1/role-permissions",
            json={"role_id": role.id, "permission_id": item_read.id},
            headers=auth_headers,
        )
        assert response.status_code == 201
        assert response.json()["data"]["permission"]["entity_set"] == "item"
        assert response.json()["data"]["role"]["name"] == "admin"

        response = await client.get(
            f"/api/v1/role-permissions/roles/{role.id}", headers=auth_headers
        )
        assert [g["permission_id"] for g in response.json()["data"]] == [item_read.id]

        response = await client.get(
            f"/api/v1/role-permissions/permissions/{item_read.id}", headers=auth_headers
        )
        assert [g["role_id"] for g in response.json()["data"]] == [role.id]

        response = await client.delete(
            f"/api/v1/role-permissions/roles/{role.id}/permissions/{item_read.id}",
            headers=auth_headers,
        )
        assert response.status_code == 204

        response = await client.delete(
            f"/api/v1/role-permissions/roles/{role.id}/permissions/{item_read.id}",
            headers=auth_headers,
        )
        assert response.status_code == 404

    async def test_duplicate_and_missing(
        self, client: AsyncClient, user, auth_headers, grant, role, item_read
    ):
        await grant(user, EntitySet.ROLE_PERMISSION, CREATE)
        body = {"role_id": role.id, "permission_id": item_read.id}
        await client.post("/api/v1/role-permissions", json=body, headers=auth_headers)

        response = await client.post(
            "/api/v1/role-permissions", json=body, headers=auth_headers
        )
        assert response.status_code == 409

        response = await client.post(
            "/api/v1/role-permissions",
            json={"role_id": role.id, "permission_id": 9999},
            headers=auth_headers,
        )
        assert response.status_code == 404


class TestUserPermissions:
    """Tests for /user-permissions."""

    async def test_direct_grant_takes_effect(
        self, client: AsyncClient, db, user, auth_headers, grant, create_user, item_read
    ):
        await grant(user, EntitySet.USER_PERMISSION, CREATE)
        await grant(user, EntitySet.USER_PERMISSION, READ)
        other = await create_user()
        resolver = AuthorizationResolver(db)
        assert not await resolver.check_access(other.id, EntitySet.ITEM, READ, Instance(5))

        response = await client.post(
            "/api/v1/user-permissions",
            json={"user_id": other.id, "permission_id": item_read.id},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["user"]["email"] == other.email
        assert await resolver.check_access(other.id, EntitySet.ITEM, READ, Instance(5))

        response = await client.get(
            f"/api/v1/user-permissions/users/{other.id}", headers=auth_headers
        )
        assert [g["permission_id"] for g in response.json()["data"]] == [item_read.id]

    async def test_revoke(
        self, client: AsyncClient, db, user, auth_headers, grant, create_user, item_read
    ):
        await grant(user, EntitySet.USER_PERMISSION, DELETE)
        other = await create_user()
        await grant(other, EntitySet.ITEM, READ)

        response = await client.delete(
            f"/api/v1/user-permissions/users/{other.id}/permissions/{item_read.id}",
            headers=auth_headers,
        )

        assert response.status_code == 204
        resolver = AuthorizationResolver(db)
        assert not await resolver.check_access(other.id, EntitySet.ITEM, READ)


class TestUserRoles:
    """Tests for /user-roles."""

    async def test_membership_grants_role_permissions(
        self, client: AsyncClient, db, user, auth_headers, grant, role, item_read
    ):
        await grant(user, EntitySet.USER_ROLE, CREATE)
        await grant(user, EntitySet.USER_ROLE, READ)
        await grant(user, EntitySet.USER_ROLE, DELETE)
        await grant(user, EntitySet.ROLE_PERMISSION, CREATE)
        await client.post(
            "/api/v1/role-permissions",
            json={"role_id": role.id, "permission_id": item_read.id},
            headers=auth_headers,
        )

        response = await client.post(
            "/api/v1/user-roles",
            json={"user_id": user.id, "role_id": role.id},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["role"]["name"] == "admin"
        response = await client.get("/api/v1/items", headers=auth_headers)
        assert response.status_code == 200

        response = await client.get(
            f"/api/v1/user-roles/roles/{role.id}", headers=auth_headers
        )
        assert [m["user_id"] for m in response.json()["data"]] == [user.id]

        response = await client.delete(
            f"/api/v1/user-roles/users/{user.id}/roles/{role.id}", headers=auth_headers
        )
        assert response.status_code == 204
        response = await client.get("/api/v1/items", headers=auth_headers)
        assert response.status_code == 403

    async def test_duplicate_membership(
        self, client: AsyncClient, user, auth_headers, grant, role
    ):
        await grant(user, EntitySet.USER_ROLE, CREATE)
        body = {"user_id": user.id, "role_id": role.id}
        await client.post("/api/v1/user-roles", json=body, headers=auth_headers)

        response = await client.post("/api/v1/user-roles", json=body, headers=auth_headers)

        assert response.status_code == 409
