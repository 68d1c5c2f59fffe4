"""User API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from gatehouse.api.schemas import Envelope
from gatehouse.core.auth.dependencies import CurrentUser
from gatehouse.core.permissions.dependencies import (
    AccessibleEntitiesAuthorization,
    EntityAuthorization,
)
from gatehouse.core.permissions.enrichment import (
    IncludeAuthorization,
    include_authorization,
)
from gatehouse.core.permissions.resolver import Resolver
from gatehouse.core.permissions.schemas import AuthorizationSummaryResponse
from gatehouse.core.permissions.types import AccessScope, EntitySet, PermissionType
from gatehouse.modules.users.schemas import UserResponse, UserUpdate
from gatehouse.modules.users.services import UserSvc


router = APIRouter(prefix="/users", tags=["users"])

list_users_access = AccessibleEntitiesAuthorization(EntitySet.USER, PermissionType.READ)
read_user = EntityAuthorization(EntitySet.USER, PermissionType.READ, param="user_id")
update_user_access = EntityAuthorization(
    EntitySet.USER, PermissionType.UPDATE, param="user_id"
)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
    description="Returns the currently authenticated user's profile.",
)
async def get_me(current_user: CurrentUser) -> UserResponse:
    """Get current user profile."""
    return UserResponse.model_validate(current_user)


@router.get(
    "/me/authorization",
    response_model=AuthorizationSummaryResponse,
    summary="Get current user's authorization summary",
    description="Entity sets the current user holds set-level or instance grants on.",
)
async def get_my_authorization(
    current_user: CurrentUser,
    resolver: Resolver,
) -> AuthorizationSummaryResponse:
    """Summarize the current user's grants by entity set."""
    summary = await resolver.find_authorization_summary(current_user.id)
    return AuthorizationSummaryResponse.model_validate(summary)


@router.get(
    "",
    response_model=Envelope[list[UserResponse]],
    summary="List users",
    description="Lists every user the caller may read.",
)
async def list_users(
    access: Annotated[AccessScope, Depends(list_users_access)],
    current_user: CurrentUser,
    service: UserSvc,
    resolver: Resolver,
    authorization: IncludeAuthorization = False,
) -> Envelope[list[UserResponse]]:
    """List readable users."""
    user_ids = None if access.has_set_access else access.accessible_entities
    users = [UserResponse.model_validate(u) for u in await service.list_users(user_ids)]

    if not authorization:
        return Envelope(data=users)

    users, metadata = await include_authorization(
        resolver, current_user.id, EntitySet.USER, users
    )
    return Envelope(data=users, metadata=metadata)


@router.get(
    "/{user_id}",
    response_model=Envelope[UserResponse],
    dependencies=[Depends(read_user)],
    summary="Get user",
)
async def get_user(
    user_id: int,
    current_user: CurrentUser,
    service: UserSvc,
    resolver: Resolver,
    authorization: IncludeAuthorization = False,
) -> Envelope[UserResponse]:
    """Get a single user."""
    user = UserResponse.model_validate(await service.get_user(user_id))

    if not authorization:
        return Envelope(data=user)

    [user], metadata = await include_authorization(
        resolver, current_user.id, EntitySet.USER, [user]
    )
    return Envelope(data=user, metadata=metadata)


@router.patch(
    "/{user_id}",
    response_model=Envelope[UserResponse],
    dependencies=[Depends(update_user_access)],
    summary="Update user",
)
async def update_user(
    user_id: int,
    data: UserUpdate,
    service: UserSvc,
) -> Envelope[UserResponse]:
    """Update a user's profile."""
    user = await service.update_user(user_id, data)
    return Envelope(data=UserResponse.model_validate(user))
