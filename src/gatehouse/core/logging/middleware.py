"""Request logging middleware.

Every API request produces a ``request_started`` and a
``request_completed`` event. When an authorization dependency ran, the
completion event also records the access scope it granted, so a log line
shows both who asked and how much they were allowed to see.
"""

import time
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from gatehouse.core.permissions.types import AccessScope


logger = structlog.get_logger()

# Probes and docs are polled constantly and carry no principal
QUIET_PATH_PREFIXES = ("/health", "/docs", "/redoc", "/openapi.json")


def get_client_ip(request: Request) -> str | None:
    """Return the originating client address, honouring proxy headers."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or (
        request.client.host if request.client else None
    )


def access_context(access: AccessScope | None) -> dict[str, Any]:
    """Summarize the access scope an authorization dependency attached.

    Only sizes are logged; entity ids can be numerous.
    """
    if access is None:
        return {}
    context: dict[str, Any] = {"set_access": access.has_set_access}
    if access.accessible_entities is not None:
        context["entity_count"] = len(access.accessible_entities)
    return context


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log request start and completion with timing and access context.

    Args:
        app: The ASGI application
        quiet_prefixes: Path prefixes that are passed through unlogged
    """

    def __init__(
        self,
        app: Any,
        quiet_prefixes: tuple[str, ...] = QUIET_PATH_PREFIXES,
    ) -> None:
        super().__init__(app)
        self.quiet_prefixes = quiet_prefixes

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        if path.startswith(self.quiet_prefixes):
            return await call_next(request)

        started = time.perf_counter()
        logger.info(
            "request_started",
            method=request.method,
            path=path,
            query=str(request.url.query) or None,
            client_ip=get_client_ip(request),
        )

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed",
                method=request.method,
                path=path,
                duration_ms=_elapsed_ms(started),
            )
            raise

        state = request.state
        event: dict[str, Any] = {
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": _elapsed_ms(started),
            "user_id": getattr(state, "user_id", None),
            **access_context(getattr(state, "access", None)),
        }

        if response.status_code >= 500:
            logger.error("request_completed", **event)
        elif response.status_code >= 400:
            logger.warning("request_completed", **event)
        else:
            logger.info("request_completed", **event)
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
