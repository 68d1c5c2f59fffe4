"""Error types raised by stores, services and authorization dependencies.

Each class fixes an HTTP status and a default ``error_code``; call sites
override the code when a client needs to tell failures apart, e.g.
``duplicate_grant`` versus ``duplicate_permission``. The handlers in
``core.errors.handlers`` turn them into Problem Details bodies.
"""

from typing import Any


class AppException(Exception):
    """Root of the gatehouse error hierarchy.

    Attributes:
        message: Text shown to the client as ``detail``
        error_code: Last path segment of the problem ``type``
        status_code: HTTP status of the rendered response
        details: Extra members merged into the problem body
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if message is not None:
            self.message = message
        if error_code is not None:
            self.error_code = error_code
        self.details = dict(details or {})
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.error_code!r}, {self.message!r})"


class NotFoundError(AppException):
    """A user, role, item, permission or grant row does not exist.

    ``resource`` names the entity set and ``resource_id`` the missing key;
    composite grant keys are passed as ``"role_id:permission_id"``.
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: int | str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        if resource:
            self.details["resource"] = resource
        if resource_id is not None:
            self.details["resource_id"] = str(resource_id)


class ConflictError(AppException):
    """The row being inserted already exists."""

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Input was well-formed JSON but not acceptable.

    Field problems are passed as ``errors``, a list of
    ``{"field": ..., "message": ...}`` mappings.
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        if errors:
            self.details["errors"] = errors


class AuthenticationError(AppException):
    """The request carries no usable access token."""

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class AuthorizationError(AppException):
    """The caller is known but the resolver answered deny."""

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class StoreError(AppException):
    """A query against the database failed.

    Only the generic message reaches the client.
    """

    message = "Database error"
    error_code = "store_error"
    status_code = 500
