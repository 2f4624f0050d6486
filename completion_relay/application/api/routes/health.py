"""
Health Check and Metrics Routes

- GET /health: liveness probe for load balancers (fast, no dependency checks)
- GET /metrics: Prometheus exposition format
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Response
from pydantic import BaseModel

from completion_relay.application.api.dependencies import SettingsDep
from completion_relay.infrastructure.monitoring import get_metrics_collector

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    status: str  # "healthy"
    version: str
    timestamp: str  # ISO 8601


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep):
    """Quick health check endpoint for load balancers."""
    return HealthResponse(
        status="healthy",
        version=settings.app.APP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/metrics")
async def prometheus_metrics():
    metrics = get_metrics_collector()
    return Response(content=metrics.get_prometheus_metrics(), media_type=metrics.get_content_type())
