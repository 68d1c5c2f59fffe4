"""Root API router: probes, service info and the versioned API."""

from typing import Any

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from gatehouse import __version__
from gatehouse.api.dependencies import DBSession
from gatehouse.config import settings
from gatehouse.core.auth.routes import router as auth_router
from gatehouse.core.permissions.models import Permission
from gatehouse.core.permissions.registry import INSTANCE_TABLES
from gatehouse.core.permissions.types import EntitySet, PermissionType
from gatehouse.modules import discover_modules


logger = structlog.get_logger()


class LivenessResponse(BaseModel):
    """Liveness probe response."""

    status: str


class ReadinessResponse(BaseModel):
    """Readiness probe response.

    ``checks`` maps each dependency to ``ok`` or a short failure reason;
    ``permissions`` is the catalog size, or None when it could not be read.
    """

    status: str
    checks: dict[str, str]
    permissions: int | None = None


health_router = APIRouter(tags=["health"])


@health_router.get(
    "/health/live",
    response_model=LivenessResponse,
    summary="Liveness probe",
    description="Returns 200 while the process can serve requests.",
)
async def liveness() -> LivenessResponse:
    """Report that the process is up."""
    return LivenessResponse(status="alive")


@health_router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description=(
        "Reads the permission catalog. Every access decision needs the grant "
        "tables, so an unreachable database means not ready."
    ),
    responses={503: {"model": ReadinessResponse}},
)
async def readiness(db: DBSession) -> JSONResponse:
    """Report whether access decisions can be served."""
    try:
        count = (await db.execute(select(func.count(Permission.id)))).scalar_one()
    except SQLAlchemyError as exc:
        logger.warning("readiness_check_failed", check="database", error=str(exc))
        body = ReadinessResponse(status="degraded", checks={"database": "unavailable"})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(),
        )

    body = ReadinessResponse(
        status="ready", checks={"database": "ok"}, permissions=count
    )
    return JSONResponse(status_code=status.HTTP_200_OK, content=body.model_dump())


@health_router.get(
    "/info",
    summary="Service info",
    description="Application metadata and the authorization vocabulary it serves.",
)
async def info() -> dict[str, Any]:
    """Describe the running service."""
    return {
        "app": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "debug": settings.debug,
        "entity_sets": [str(s) for s in EntitySet],
        "instance_entity_sets": [str(s) for s in INSTANCE_TABLES],
        "permission_types": [str(t) for t in PermissionType],
    }


v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(auth_router)
for module_router in discover_modules():
    v1_router.include_router(module_router)

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(v1_router)
