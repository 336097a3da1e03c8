"""Health, readiness and service info endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from ..core.config import Settings
from ..core.database import check_db
from ..core.dependencies import EngineDependency, SettingsDependency
from ..core.observability import SERVICE_NAME, SERVICE_VERSION
from ..schemas.health import HealthResponse, HealthStatus, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(cfg: Settings = SettingsDependency) -> HealthResponse:
    """Liveness check; does not touch the database."""
    return HealthResponse(
        status=HealthStatus.HEALTHY,
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        environment=cfg.environment,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(engine: AsyncEngine = EngineDependency) -> JSONResponse:
    """
    Readiness check.

    Returns 503 when the database cannot answer ``SELECT 1``.
    """
    try:
        database_ok = await check_db(engine)
    except Exception as e:
        logger.error("Readiness check failed", extra={"error": str(e)})
        database_ok = False

    response = ReadinessResponse(
        status=HealthStatus.READY if database_ok else HealthStatus.UNAVAILABLE,
        checks={"database": "ok" if database_ok else "unavailable"},
    )
    return JSONResponse(
        status_code=200 if database_ok else 503,
        content=response.model_dump(mode="json"),
    )


@router.get("/info")
async def service_info(cfg: Settings = SettingsDependency) -> dict:
    """Service information endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "description": "REST backend for tours, guides, tourists and reservations",
        "environment": cfg.environment,
        "debug": cfg.debug,
        "endpoints": {
            "tours": "/api/tours",
            "users": "/api/users",
            "health": "/health",
            "readiness": "/ready",
            "metrics": "/metrics",
            "docs": "/docs" if cfg.debug else None,
        },
    }
