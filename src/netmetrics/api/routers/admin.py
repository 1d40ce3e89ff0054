"""Admin API endpoints - health, metrics, system info."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from netmetrics.common.config import get_settings

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health/live")
async def liveness() -> dict[str, str]:
    """Liveness probe.

    Returns 200 if the process is alive.
    """
    return {"status": "ok"}


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


@router.get("/info")
async def info() -> dict[str, Any]:
    """Application info and effective calibration settings."""
    settings = get_settings()
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "series": {
            "default_step_seconds": settings.series.default_step_seconds,
            "lag_tolerance_seconds": settings.series.lag_tolerance_seconds,
        },
        "parser": {
            "worker_count": settings.parser.worker_count,
            "parallel_threshold": settings.parser.parallel_threshold,
        },
    }
