"""RFC 7807 Problem Details exception handlers.

Every error leaves the API as ``application/problem+json``-shaped JSON
whose ``type`` ends in the machine-readable error code, e.g.
``.../errors/permission_denied``. Store failures never leak SQL or driver
messages to the client; they are logged with the request ID instead.

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from gatehouse.config import settings
from gatehouse.core.errors.exceptions import (
    AppException,
    ConflictError,
    StoreError,
    ValidationError,
)


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()


class FieldError(BaseModel):
    """One invalid field of a request."""

    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details body.

    Exception ``details`` are merged in as extension members, so a denied
    request also reports the ``entity_set`` and ``permission_type`` it asked for.
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None

    model_config = {"extra": "allow"}


def problem_response(
    request: Request,
    exc: AppException,
    errors: list[FieldError] | None = None,
) -> JSONResponse:
    """Render ``exc`` as a Problem Details response."""
    body = ProblemDetail(
        type=f"{settings.api_docs_base_url}/errors/{exc.error_code}",
        title=exc.error_code.replace("_", " ").title(),
        status=exc.status_code,
        detail=exc.message,
        instance=request.url.path,
        errors=errors,
        trace_id=getattr(request.state, "trace_id", None),
    ).model_dump(exclude_none=True)

    for key, value in exc.details.items():
        body.setdefault(key, value)

    return JSONResponse(status_code=exc.status_code, content=body)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render a domain exception raised by a service or dependency."""
    logger.warning(
        "app_exception",
        error_code=exc.error_code,
        status_code=exc.status_code,
        path=request.url.path,
        details=exc.details,
    )
    return problem_response(request, exc)


async def integrity_error_handler(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    """Report a uniqueness race that slipped past a repository check as 409.

    Two concurrent inserts of the same grant can both pass the existence
    check; the loser ends up here.
    """
    logger.warning("integrity_error", path=request.url.path, error=str(exc.orig))
    return problem_response(request, ConflictError("Duplicate entry"))


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Report any other database failure as a sanitized 500."""
    logger.exception(
        "store_error", path=request.url.path, error_type=type(exc).__name__
    )
    return problem_response(request, StoreError())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report pydantic validation failures with one entry per field."""
    errors = [
        FieldError(
            field=".".join(str(part) for part in error.get("loc", ()) if part != "body")
            or "unknown",
            message=error.get("msg", "Invalid value"),
            type=error.get("type"),
        )
        for error in exc.errors()
    ]
    logger.warning("validation_error", path=request.url.path, error_count=len(errors))
    return problem_response(
        request, ValidationError("Request validation failed"), errors=errors
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report anything unexpected as a generic 500; details stay in the log."""
    logger.exception(
        "unhandled_exception", path=request.url.path, error_type=type(exc).__name__
    )
    return problem_response(request, AppException())


def register_exception_handlers(app: FastAPI) -> None:
    """Install the Problem Details handlers on ``app``.

    ``IntegrityError`` is registered before its base ``SQLAlchemyError``;
    Starlette picks the most specific class either way.
    """
    handlers: list[tuple[type[Exception], Any]] = [
        (AppException, app_exception_handler),
        (IntegrityError, integrity_error_handler),
        (SQLAlchemyError, store_error_handler),
        (RequestValidationError, request_validation_handler),
        (Exception, unhandled_exception_handler),
    ]
    for exc_class, handler in handlers:
        app.add_exception_handler(exc_class, cast("ExceptionHandler", handler))
