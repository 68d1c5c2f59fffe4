"""Bearer-token authentication for routes.

Routes declare ``user: CurrentUser``; authorization dependencies in
``core.permissions.dependencies`` build on the same principal.
"""

from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from gatehouse.api.dependencies import DBSession
from gatehouse.core.auth.backend import ACCESS_TOKEN_TYPE, decode_token
from gatehouse.core.auth.schemas import TokenData
from gatehouse.core.errors import AuthenticationError


bearer_scheme = HTTPBearer(auto_error=False)

BearerCredentials = Annotated[
    HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
]


async def get_token_data(credentials: BearerCredentials) -> TokenData:
    """Decode the bearer token.

    Raises:
        AuthenticationError: ``missing_token`` without a header,
            ``invalid_token`` when it fails verification or is not an
            access token
    """
    if credentials is None:
        raise AuthenticationError(
            "Missing authentication token", error_code="missing_token"
        )

    token_data = decode_token(credentials.credentials)
    if token_data is None or token_data.type != ACCESS_TOKEN_TYPE:
        raise AuthenticationError(
            "Invalid or expired token", error_code="invalid_token"
        )
    return token_data


async def get_current_user(
    token_data: Annotated[TokenData, Depends(get_token_data)],
    db: DBSession,
    request: Request,
) -> Any:
    """Load the token's user and record its id on ``request.state``.

    A token for a deleted user is rejected with ``invalid_token``; its
    grants went with it.
    """
    from gatehouse.modules.users.repos import UserRepository  # noqa: PLC0415

    user = await UserRepository(db).get_by_id(token_data.user_id)
    if user is None:
        raise AuthenticationError(
            "Token subject no longer exists", error_code="invalid_token"
        )

    request.state.user_id = user.id
    return user


# Typed as Any so this module does not import the users models
CurrentUser = Annotated[Any, Depends(get_current_user)]
