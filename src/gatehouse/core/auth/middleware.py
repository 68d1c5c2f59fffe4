"""Middleware that tags each request for tracing and logging."""

import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from gatehouse.core.auth.backend import decode_token


ANONYMOUS_PATH_PREFIXES = (
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/api/v1/auth/login",
    "/api/v1/auth/register",
)


def bearer_token(request: Request) -> str | None:
    """Return the raw token of an ``Authorization: Bearer`` header."""
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


class PrincipalContextMiddleware(BaseHTTPMiddleware):
    """Bind the token subject to the structlog context.

    This is a logging aid only. A bad token is ignored here and rejected
    by ``CurrentUser`` on routes that require one.

    Args:
        app: The ASGI application
        anonymous_prefixes: Paths that never carry a principal
    """

    def __init__(
        self,
        app: ASGIApp,
        anonymous_prefixes: tuple[str, ...] = ANONYMOUS_PATH_PREFIXES,
    ) -> None:
        super().__init__(app)
        self.anonymous_prefixes = anonymous_prefixes

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if not request.url.path.startswith(self.anonymous_prefixes):
            token = bearer_token(request)
            token_data = decode_token(token) if token else None
            if token_data is not None:
                structlog.contextvars.bind_contextvars(user_id=token_data.user_id)
        return await call_next(request)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Propagate or mint an ``X-Request-ID`` for every request.

    The id is stored as ``request.state.trace_id`` for problem bodies,
    bound into the structlog context, and echoed on the response.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request.state.trace_id = request_id

        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "user_id")

        response.headers["X-Request-ID"] = request_id
        return response
