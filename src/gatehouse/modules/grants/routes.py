"""Grant and membership API routes.

Join rows have no instances of their own; each collection is gated by
set-level grants on its entity set (``role_permission``,
``user_permission``, ``user_role``).
"""

from typing import Any

from fastapi import APIRouter, Depends, status

from gatehouse.api.schemas import Envelope
from gatehouse.core.permissions.dependencies import EntitySetAuthorization
from gatehouse.core.permissions.grants import RolePermissionRepo, UserPermissionRepo
from gatehouse.core.permissions.membership import UserRoleRepo
from gatehouse.core.permissions.schemas import (
    RolePermissionCreate,
    RolePermissionResponse,
    UserPermissionCreate,
    UserPermissionResponse,
    UserRoleCreate,
    UserRoleResponse,
)
from gatehouse.core.permissions.types import EntitySet, PermissionType


router = APIRouter()

role_permissions_router = APIRouter(prefix="/role-permissions", tags=["grants"])
user_permissions_router = APIRouter(prefix="/user-permissions", tags=["grants"])
user_roles_router = APIRouter(prefix="/user-roles", tags=["grants"])


def _gate(entity_set: EntitySet, permission_type: PermissionType) -> list[Any]:
    return [Depends(EntitySetAuthorization(entity_set, permission_type))]


# ============================================================
# Role permissions
# ============================================================


@role_permissions_router.get(
    "/roles/{role_id}",
    response_model=Envelope[list[RolePermissionResponse]],
    dependencies=_gate(EntitySet.ROLE_PERMISSION, PermissionType.READ),
    summary="List a role's permissions",
)
async def list_role_permissions_by_role(
    role_id: int,
    repo: RolePermissionRepo,
) -> Envelope[list[RolePermissionResponse]]:
    """List the permissions granted to a role."""
    grants = await repo.find_by_role_ids([role_id])
    return Envelope(data=[RolePermissionResponse.model_validate(g) for g in grants])


@role_permissions_router.get(
    "/permissions/{permission_id}",
    response_model=Envelope[list[RolePermissionResponse]],
    dependencies=_gate(EntitySet.ROLE_PERMISSION, PermissionType.READ),
    summary="List roles holding a permission",
)
async def list_role_permissions_by_permission(
    permission_id: int,
    repo: RolePermissionRepo,
) -> Envelope[list[RolePermissionResponse]]:
    """List the roles a permission is granted to."""
    grants = await repo.find_by_permission_ids([permission_id])
    return Envelope(data=[RolePermissionResponse.model_validate(g) for g in grants])


@role_permissions_router.post(
    "",
    response_model=Envelope[RolePermissionResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=_gate(EntitySet.ROLE_PERMISSION, PermissionType.CREATE),
    summary="Grant a permission to a role",
)
async def create_role_permission(
    data: RolePermissionCreate,
    repo: RolePermissionRepo,
) -> Envelope[RolePermissionResponse]:
    """Grant a permission to a role."""
    grant = await repo.create(data.role_id, data.permission_id)
    return Envelope(data=RolePermissionResponse.model_validate(grant))


@role_permissions_router.delete(
    "/roles/{role_id}/permissions/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=_gate(EntitySet.ROLE_PERMISSION, PermissionType.DELETE),
    summary="Revoke a permission from a role",
)
async def delete_role_permission(
    role_id: int,
    permission_id: int,
    repo: RolePermissionRepo,
) -> None:
    """Revoke a permission from a role."""
    await repo.delete(role_id, permission_id)


# ============================================================
# Direct user permissions
# ============================================================


@user_permissions_router.get(
    "/users/{user_id}",
    response_model=Envelope[list[UserPermissionResponse]],
    dependencies=_gate(EntitySet.USER_PERMISSION, PermissionType.READ),
    summary="List a user's direct permissions",
)
async def list_user_permissions_by_user(
    user_id: int,
    repo: UserPermissionRepo,
) -> Envelope[list[UserPermissionResponse]]:
    """List the permissions granted directly to a user."""
    grants = await repo.find_by_user_ids([user_id])
    return Envelope(data=[UserPermissionResponse.model_validate(g) for g in grants])


@user_permissions_router.get(
    "/permissions/{permission_id}",
    response_model=Envelope[list[UserPermissionResponse]],
    dependencies=_gate(EntitySet.USER_PERMISSION, PermissionType.READ),
    summary="List users holding a permission directly",
)
async def list_user_permissions_by_permission(
    permission_id: int,
    repo: UserPermissionRepo,
) -> Envelope[list[UserPermissionResponse]]:
    """List the users a permission is granted to directly."""
    grants = await repo.find_by_permission_ids([permission_id])
    return Envelope(data=[UserPermissionResponse.model_validate(g) for g in grants])


@user_permissions_router.post(
    "",
    response_model=Envelope[UserPermissionResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=_gate(EntitySet.USER_PERMISSION, PermissionType.CREATE),
    summary="Grant a permission directly to a user",
)
async def create_user_permission(
    data: UserPermissionCreate,
    repo: UserPermissionRepo,
) -> Envelope[UserPermissionResponse]:
    """Grant a permission directly to a user."""
    grant = await repo.create(data.user_id, data.permission_id)
    return Envelope(data=UserPermissionResponse.model_validate(grant))


@user_permissions_router.delete(
    "/users/{user_id}/permissions/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=_gate(EntitySet.USER_PERMISSION, PermissionType.DELETE),
    summary="Revoke a direct permission from a user",
)
async def delete_user_permission(
    user_id: int,
    permission_id: int,
    repo: UserPermissionRepo,
) -> None:
    """Revoke a direct permission from a user."""
    await repo.delete(user_id, permission_id)


# ============================================================
# User roles
# ============================================================


@user_roles_router.get(
    "/users/{user_id}",
    response_model=Envelope[list[UserRoleResponse]],
    dependencies=_gate(EntitySet.USER_ROLE, PermissionType.READ),
    summary="List a user's roles",
)
async def list_user_roles_by_user(
    user_id: int,
    repo: UserRoleRepo,
) -> Envelope[list[UserRoleResponse]]:
    """List the roles a user holds."""
    memberships = await repo.find_by_user_ids([user_id])
    return Envelope(data=[UserRoleResponse.model_validate(m) for m in memberships])


@user_roles_router.get(
    "/roles/{role_id}",
    response_model=Envelope[list[UserRoleResponse]],
    dependencies=_gate(EntitySet.USER_ROLE, PermissionType.READ),
    summary="List a role's members",
)
async def list_user_roles_by_role(
    role_id: int,
    repo: UserRoleRepo,
) -> Envelope[list[UserRoleResponse]]:
    """List the users holding a role."""
    memberships = await repo.find_by_role_ids([role_id])
    return Envelope(data=[UserRoleResponse.model_validate(m) for m in memberships])


@user_roles_router.post(
    "",
    response_model=Envelope[UserRoleResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=_gate(EntitySet.USER_ROLE, PermissionType.CREATE),
    summary="Add a user to a role",
)
async def create_user_role(
    data: UserRoleCreate,
    repo: UserRoleRepo,
) -> Envelope[UserRoleResponse]:
    """Add a user to a role."""
    membership = await repo.create(data.user_id, data.role_id)
    return Envelope(data=UserRoleResponse.model_validate(membership))


@user_roles_router.delete(
    "/users/{user_id}/roles/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=_gate(EntitySet.USER_ROLE, PermissionType.DELETE),
    summary="Remove a user from a role",
)
async def delete_user_role(
    user_id: int,
    role_id: int,
    repo: UserRoleRepo,
) -> None:
    """Remove a user from a role."""
    await repo.delete(user_id, role_id)


router.include_router(role_permissions_router)
router.include_router(user_permissions_router)
router.include_router(user_roles_router)
