"""Authentication API routes.

Provides endpoints for:
- User registration
- Login
"""

from fastapi import APIRouter, status

from gatehouse.core.auth.service import AuthSvc
from gatehouse.core.permissions.schemas import AuthorizationSummaryResponse
from gatehouse.modules.users.schemas import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Creates a user account. The user can read and update their own account.",
)
async def register(data: RegisterRequest, service: AuthSvc) -> RegisterResponse:
    """Register a new user."""
    user, access_token = await service.register(
        name=data.name,
        email=data.email,
        password=data.password,
    )

    return RegisterResponse(
        user=UserResponse.model_validate(user),
        access_token=access_token,
        expires_in=service.expires_in,
    )


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    description="Returns a bearer token and the user's authorization summary.",
)
async def login(data: LoginRequest, service: AuthSvc) -> TokenResponse:
    """Login with email and password."""
    _user, access_token, summary = await service.login(
        email=data.email,
        password=data.password,
    )

    return TokenResponse(
        access_token=access_token,
        expires_in=service.expires_in,
        authorization=AuthorizationSummaryResponse.model_validate(summary),
    )
