"""Unit tests for the grant and membership stores."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from gatehouse.core.errors import ConflictError, NotFoundError
from gatehouse.core.permissions.catalog import PermissionCatalog
from gatehouse.core.permissions.grants import (
    RolePermissionRepository,
    UserPermissionRepository,
)
from gatehouse.core.permissions.membership import UserRoleRepository
from gatehouse.core.permissions.models import Permission, Role
from gatehouse.core.permissions.types import EntitySet, PermissionType
from tests.factories import RoleFactory


pytestmark = pytest.mark.unit


@pytest.fixture
async def permission(db: AsyncSession) -> Permission:
    return await PermissionCatalog(db).create(EntitySet.ITEM, PermissionType.READ)


@pytest.fixture
async def role(db: AsyncSession) -> Role:
    role = RoleFactory.build()
    db.add(role)
    await db.flush()
    return role


class TestRolePermissionRepository:
    """Tests for role grants."""

    async def test_create_and_find(self, db, role, permission):
        repo = RolePermissionRepository(db)

        grant = await repo.create(role.id, permission.id)

        assert grant.role_id == role.id
        assert grant.permission.name == "item:read:*"
        [by_role] = await repo.find_by_role_ids([role.id])
        [by_permission] = await repo.find_by_permission_ids([permission.id])
        assert by_role.permission_id == by_permission.permission_id == permission.id

    async def test_duplicate_grant_conflicts(self, db, role, permission):
        repo = RolePermissionRepository(db)
        await repo.create(role.id, permission.id)

        with pytest.raises(ConflictError) as exc_info:
            await repo.create(role.id, permission.id)

        assert exc_info.value.error_code == "duplicate_grant"

    async def test_missing_role_or_permission(self, db, role, permission):
        repo = RolePermissionRepository(db)

        with pytest.raises(NotFoundError):
            await repo.create(9999, permission.id)
        with pytest.raises(NotFoundError):
            await repo.create(role.id, 9999)

    async def test_delete(self, db, role, permission):
        repo = RolePermissionRepository(db)
        await repo.create(role.id, permission.id)

        await repo.delete(role.id, permission.id)

        assert await repo.find_by_role_ids([role.id]) == []
        with pytest.raises(NotFoundError):
            await repo.delete(role.id, permission.id)


class TestUserPermissionRepository:
    """Tests for direct grants."""

    async def test_create_and_find(self, db, user, permission):
        repo = UserPermissionRepository(db)

        await repo.create(user.id, permission.id)

        [grant] = await repo.find_by_user_ids([user.id])
        assert grant.permission_id == permission.id
        [grant] = await repo.find_by_permission_ids([permission.id])
        assert grant.user_id == user.id

    async def test_duplicate_grant_conflicts(self, db, user, permission):
        repo = UserPermissionRepository(db)
        await repo.create(user.id, permission.id)

        with pytest.raises(ConflictError):
            await repo.create(user.id, permission.id)

    async def test_missing_user(self, db, permission):
        with pytest.raises(NotFoundError):
            await UserPermissionRepository(db).create(9999, permission.id)

    async def test_delete_missing_grant(self, db, user, permission):
        with pytest.raises(NotFoundError):
            await UserPermissionRepository(db).delete(user.id, permission.id)


class TestUserRoleRepository:
    """Tests for role membership."""

    async def test_create_and_find(self, db, user, role):
        repo = UserRoleRepository(db)

        membership = await repo.create(user.id, role.id)

        assert membership.role.name == role.name
        [by_user] = await repo.find_by_user_ids([user.id])
        [by_role] = await repo.find_by_role_ids([role.id])
        assert by_user.role_id == by_role.role_id == role.id

    async def test_duplicate_membership_conflicts(self, db, user, role):
        repo = UserRoleRepository(db)
        await repo.create(user.id, role.id)

        with pytest.raises(ConflictError) as exc_info:
            await repo.create(user.id, role.id)

        assert exc_info.value.error_code == "duplicate_membership"

    async def test_missing_user_or_role(self, db, user, role):
        repo = UserRoleRepository(db)

        with pytest.raises(NotFoundError):
            await repo.create(9999, role.id)
        with pytest.raises(NotFoundError):
            await repo.create(user.id, 9999)

    async def test_delete(self, db, user, role):
        repo = UserRoleRepository(db)
        await repo.create(user.id, role.id)

        await repo.delete(user.id, role.id)

        assert await repo.find_by_user_ids([user.id]) == []
