"""Error handling module with RFC 7807 Problem Details."""

from gatehouse.core.errors.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from gatehouse.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    # Handlers
    "FieldError",
    "NotFoundError",
    "ProblemDetail",
    "StoreError",
    "ValidationError",
    "register_exception_handlers",
]
