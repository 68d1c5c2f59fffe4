"""ASGI entry point for the authorization service.

Run with ``uvicorn gatehouse.main:app``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gatehouse import __version__
from gatehouse.api.router import api_router
from gatehouse.config import settings
from gatehouse.core.auth import PrincipalContextMiddleware, RequestIdMiddleware
from gatehouse.core.database import async_engine
from gatehouse.core.errors import register_exception_handlers
from gatehouse.core.logging import RequestLoggingMiddleware, configure_logging


configure_logging(settings.log_level, json=settings.is_production)

logger = structlog.get_logger()

DEV_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Log startup, and release pooled connections on shutdown."""
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        version=__version__,
        environment=settings.environment,
    )
    try:
        yield
    finally:
        await async_engine.dispose()
        logger.info("application_shutdown")


def create_app() -> FastAPI:
    """Build the FastAPI application.

    Interactive docs are only served outside production.
    """
    show_docs = not settings.is_production
    app = FastAPI(
        title=settings.app_name,
        description="Role and direct-grant authorization service",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        openapi_url="/openapi.json" if show_docs else None,
    )

    origins = settings.cors_origins
    if not origins and settings.is_development:
        origins = DEV_CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    # Added last runs first: request id, principal, then request logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(PrincipalContextMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
