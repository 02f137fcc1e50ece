"""Operational endpoints: probes, Prometheus metrics and service info."""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from itiac.api.dependencies import AppSettings
from itiac.common.config import get_settings
from itiac.common.health import HealthChecker, HealthStatus

router = APIRouter(prefix="/admin", tags=["admin"])


@lru_cache
def get_health_checker() -> HealthChecker:
    return HealthChecker(service_name="itiac-api", version=get_settings().app_version)


@router.get("/health")
async def health() -> dict[str, Any]:
    """Full health report, always 200."""
    return (await get_health_checker().readiness()).to_dict()


@router.get("/health/live")
async def liveness() -> dict[str, str]:
    """Liveness probe: the process answers."""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness() -> JSONResponse:
    """Readiness probe: 503 when the engine probe fails."""
    report = await get_health_checker().readiness()
    status_code = 503 if report.status == HealthStatus.UNHEALTHY else 200
    return JSONResponse(status_code=status_code, content=report.to_dict())


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus text exposition."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/info")
async def info(settings: AppSettings) -> dict[str, Any]:
    """Effective configuration relevant to analysis clients."""
    analysis = settings.analysis
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "analysis": {
            "default_scope": analysis.default_scope,
            "max_graph_nodes": analysis.max_graph_nodes,
            "max_graph_edges": analysis.max_graph_edges,
            "max_depth": analysis.max_depth,
            "spof_outgoing_threshold": analysis.spof_outgoing_threshold,
        },
    }
