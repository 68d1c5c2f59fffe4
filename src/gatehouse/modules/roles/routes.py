"""Role API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from gatehouse.api.schemas import Envelope
from gatehouse.core.auth.dependencies import CurrentUser
from gatehouse.core.permissions.dependencies import (
    AccessibleEntitiesAuthorization,
    EntitiesAuthorization,
    EntityAuthorization,
    EntitySetAuthorization,
)
from gatehouse.core.permissions.enrichment import (
    IncludeAuthorization,
    include_authorization,
)
from gatehouse.core.permissions.resolver import Resolver
from gatehouse.core.permissions.types import AccessScope, EntitySet, PermissionType
from gatehouse.modules.roles.schemas import RoleCreate, RoleResponse, RoleUpdate
from gatehouse.modules.roles.services import RoleSvc


router = APIRouter(prefix="/roles", tags=["roles"])

list_roles_access = AccessibleEntitiesAuthorization(EntitySet.ROLE, PermissionType.READ)
create_roles = EntitySetAuthorization(EntitySet.ROLE, PermissionType.CREATE)
read_roles_batch = EntitiesAuthorization(EntitySet.ROLE, PermissionType.READ)
read_role = EntityAuthorization(EntitySet.ROLE, PermissionType.READ, param="role_id")
update_role = EntityAuthorization(EntitySet.ROLE, PermissionType.UPDATE, param="role_id")
delete_role_access = EntityAuthorization(
    EntitySet.ROLE, PermissionType.DELETE, param="role_id"
)


async def _respond(
    roles: list[RoleResponse],
    enrich: bool,
    resolver: Resolver,
    user_id: int,
) -> Envelope[list[RoleResponse]]:
    if not enrich:
        return Envelope(data=roles)
    roles, metadata = await include_authorization(resolver, user_id, EntitySet.ROLE, roles)
    return Envelope(data=roles, metadata=metadata)


@router.get(
    "",
    response_model=Envelope[list[RoleResponse]],
    summary="List roles",
    description="Lists every role the caller may read.",
)
async def list_roles(
    access: Annotated[AccessScope, Depends(list_roles_access)],
    current_user: CurrentUser,
    service: RoleSvc,
    resolver: Resolver,
    authorization: IncludeAuthorization = False,
) -> Envelope[list[RoleResponse]]:
    """List readable roles."""
    role_ids = None if access.has_set_access else access.accessible_entities
    roles = [RoleResponse.model_validate(r) for r in await service.list_roles(role_ids)]
    return await _respond(roles, authorization, resolver, current_user.id)


@router.post(
    "",
    response_model=Envelope[RoleResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(create_roles)],
    summary="Create role",
    description="Creates a role; the caller receives every permission on it.",
)
async def create_role(
    data: RoleCreate,
    current_user: CurrentUser,
    service: RoleSvc,
) -> Envelope[RoleResponse]:
    """Create a role."""
    role = await service.create_role(data.name, creator_id=current_user.id)
    return Envelope(data=RoleResponse.model_validate(role))


@router.get(
    "/batch/{ids}",
    response_model=Envelope[list[RoleResponse]],
    summary="Get roles by IDs",
    description="Comma-separated role IDs; the caller must be able to read all of them.",
)
async def get_roles_batch(
    access: Annotated[AccessScope, Depends(read_roles_batch)],
    current_user: CurrentUser,
    service: RoleSvc,
    resolver: Resolver,
    authorization: IncludeAuthorization = False,
) -> Envelope[list[RoleResponse]]:
    """Get several roles at once."""
    roles = [
        RoleResponse.model_validate(r)
        for r in await service.list_roles(access.accessible_entities)
    ]
    return await _respond(roles, authorization, resolver, current_user.id)


@router.get(
    "/{role_id}",
    response_model=Envelope[RoleResponse],
    dependencies=[Depends(read_role)],
    summary="Get role",
)
async def get_role(
    role_id: int,
    current_user: CurrentUser,
    service: RoleSvc,
    resolver: Resolver,
    authorization: IncludeAuthorization = False,
) -> Envelope[RoleResponse]:
    """Get a single role."""
    role = RoleResponse.model_validate(await service.get_role(role_id))
    envelope = await _respond([role], authorization, resolver, current_user.id)
    return Envelope(data=envelope.data[0], metadata=envelope.metadata)


@router.patch(
    "/{role_id}",
    response_model=Envelope[RoleResponse],
    dependencies=[Depends(update_role)],
    summary="Rename role",
)
async def rename_role(
    role_id: int,
    data: RoleUpdate,
    service: RoleSvc,
) -> Envelope[RoleResponse]:
    """Rename a role."""
    role = await service.rename_role(role_id, data.name)
    return Envelope(data=RoleResponse.model_validate(role))


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(delete_role_access)],
    summary="Delete role",
    description="Deletes a role with its grants, memberships and instance permissions.",
)
async def delete_role(role_id: int, service: RoleSvc) -> None:
    """Delete a role."""
    await service.delete_role(role_id)
