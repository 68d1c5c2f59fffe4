"""Authentication module for JWT and password handling.

The service and routes live in ``gatehouse.core.auth.service`` and
``gatehouse.core.auth.routes``; they depend on the users module and are
not re-exported here.
"""

from gatehouse.core.auth.backend import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from gatehouse.core.auth.dependencies import CurrentUser, get_current_user
from gatehouse.core.auth.middleware import (
    PrincipalContextMiddleware,
    RequestIdMiddleware,
)
from gatehouse.core.auth.schemas import TokenData


__all__ = [
    # Dependencies
    "CurrentUser",
    # Middleware
    "PrincipalContextMiddleware",
    "RequestIdMiddleware",
    # Schemas
    "TokenData",
    # Token utilities
    "create_access_token",
    "decode_token",
    "get_current_user",
    # Password utilities
    "hash_password",
    "verify_password",
]
