#!/usr/bin/env python
"""
Bootstrap an empty database: set-level permissions and an admin role.
"""

import argparse
import asyncio
import sys

from sqlalchemy.ext.asyncio import AsyncSession

import gatehouse.models  # noqa: F401
from gatehouse.core.auth.backend import hash_password
from gatehouse.core.database import async_session_factory
from gatehouse.core.permissions.catalog import PermissionCatalog
from gatehouse.core.permissions.grants import RolePermissionRepository
from gatehouse.core.permissions.membership import UserRoleRepository
from gatehouse.core.permissions.models import Permission, Role
from gatehouse.core.permissions.types import SET_PERMISSION_TYPES, EntitySet
from gatehouse.modules.roles.repos import RoleRepository
from gatehouse.modules.users.repos import UserRepository
from gatehouse.modules.users.services import UserService


ADMIN_ROLE = "admin"


async def ensure_set_permissions(session: AsyncSession) -> list[Permission]:
    """Create any missing set-level permission for every entity set."""
    catalog = PermissionCatalog(session)
    permissions: list[Permission] = []

    for entity_set in EntitySet:
        for permission_type in SET_PERMISSION_TYPES:
            permission = await catalog.get_by_tuple(entity_set, permission_type)
            if permission is None:
                permission = await catalog.create(entity_set, permission_type)
                print(f"Created permission: {permission.name}")
            permissions.append(permission)

    return permissions


async def ensure_admin_role(session: AsyncSession, permissions: list[Permission]) -> Role:
    """Create the admin role and grant it every set-level permission."""
    roles = RoleRepository(session)
    role = await roles.get_by_name(ADMIN_ROLE)
    if role is None:
        role = await roles.create(Role(name=ADMIN_ROLE))
        print(f"Created role: {role.name} ({role.id})")

    grants = RolePermissionRepository(session)
    granted = {g.permission_id for g in await grants.find_by_role_ids([role.id])}
    for permission in permissions:
        if permission.id not in granted:
            await grants.create(role.id, permission.id)

    return role


async def ensure_admin_user(
    session: AsyncSession, role: Role, email: str, password: str
) -> None:
    """Register the admin account if needed and add it to the admin role."""
    user = await UserRepository(session).get_by_email(email)
    if user is None:
        user = await UserService(session).register_account(
            name="Administrator",
            email=email,
            password_hash=hash_password(password),
        )
        print(f"Created admin user: {user.email} ({user.id})")

    memberships = UserRoleRepository(session)
    if await memberships.get(user.id, role.id) is None:
        await memberships.create(user.id, role.id)
        print(f"Added {user.email} to role {role.name}")


async def main(admin_email: str | None, admin_password: str | None) -> None:
    """Run the bootstrap in one transaction."""
    async with async_session_factory() as session:
        permissions = await ensure_set_permissions(session)
        role = await ensure_admin_role(session, permissions)
        if admin_email and admin_password:
            await ensure_admin_user(session, role, admin_email, admin_password)
        await session.commit()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed database with bootstrap data")
    parser.add_argument("--admin-email", help="Create or reuse this admin account")
    parser.add_argument("--admin-password", help="Password for a new admin account")
    args = parser.parse_args()

    if bool(args.admin_email) != bool(args.admin_password):
        print("--admin-email and --admin-password must be given together")
        sys.exit(1)

    asyncio.run(main(args.admin_email, args.admin_password))
