"""Permission catalog API routes.

The catalog itself is an entity set without instances, so every route is
gated by a set-level grant on ``permission``.
"""

from fastapi import APIRouter, Depends, status

from gatehouse.api.schemas import Envelope
from gatehouse.core.errors import NotFoundError
from gatehouse.core.permissions.catalog import Catalog
from gatehouse.core.permissions.dependencies import (
    EntitySetAuthorization,
    parse_entity_ids,
)
from gatehouse.core.permissions.schemas import PermissionCreate, PermissionResponse
from gatehouse.core.permissions.types import EntitySet, PermissionType, scope_of


router = APIRouter(prefix="/permissions", tags=["permissions"])

read_permissions = EntitySetAuthorization(EntitySet.PERMISSION, PermissionType.READ)
create_permissions = EntitySetAuthorization(EntitySet.PERMISSION, PermissionType.CREATE)


@router.get(
    "",
    response_model=Envelope[list[PermissionResponse]],
    dependencies=[Depends(read_permissions)],
    summary="List permissions",
)
async def list_permissions(
    catalog: Catalog,
    entity_set: EntitySet | None = None,
) -> Envelope[list[PermissionResponse]]:
    """List the catalog, optionally for one entity set."""
    permissions = await catalog.find_all(entity_set)
    return Envelope(data=[PermissionResponse.model_validate(p) for p in permissions])


@router.post(
    "",
    response_model=Envelope[PermissionResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(create_permissions)],
    summary="Create permission",
)
async def create_permission(
    data: PermissionCreate,
    catalog: Catalog,
) -> Envelope[PermissionResponse]:
    """Create a single permission."""
    permission = await catalog.create(
        data.entity_set, data.permission_type, scope_of(data.entity)
    )
    return Envelope(data=PermissionResponse.model_validate(permission))


@router.get(
    "/batch/{ids}",
    response_model=Envelope[list[PermissionResponse]],
    dependencies=[Depends(read_permissions)],
    summary="Get permissions by IDs",
)
async def get_permissions_batch(
    ids: str,
    catalog: Catalog,
) -> Envelope[list[PermissionResponse]]:
    """Get several permissions at once; unknown IDs are skipped."""
    permissions = await catalog.get_by_ids(parse_entity_ids(ids, "ids"))
    return Envelope(data=[PermissionResponse.model_validate(p) for p in permissions])


@router.get(
    "/{permission_id}",
    response_model=Envelope[PermissionResponse],
    dependencies=[Depends(read_permissions)],
    summary="Get permission",
)
async def get_permission(
    permission_id: int,
    catalog: Catalog,
) -> Envelope[PermissionResponse]:
    """Get a single permission."""
    permission = await catalog.get_by_id(permission_id)
    if not permission:
        raise NotFoundError(
            "Permission not found",
            resource="permission",
            resource_id=permission_id,
        )
    return Envelope(data=PermissionResponse.model_validate(permission))


@router.post(
    "/sets/{entity_set}",
    response_model=Envelope[list[PermissionResponse]],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(create_permissions)],
    summary="Generate set-level permissions",
    description="Creates one set-level permission per permission type. All or nothing.",
)
async def generate_set_permissions(
    entity_set: EntitySet,
    catalog: Catalog,
) -> Envelope[list[PermissionResponse]]:
    """Provision the set-level permissions of an entity set."""
    permissions = await catalog.generate_set_permissions(entity_set)
    return Envelope(data=[PermissionResponse.model_validate(p) for p in permissions])
