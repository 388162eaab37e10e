"""
Health check endpoints for monitoring and orchestration.

Provides:
- /health - Full health check with version info
- /health/live - Liveness probe
- /health/ready - Readiness probe
"""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

from questionbank.settings import get_settings

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: str
    version: str
    environment: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""
    status: str
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Full health check endpoint.

    Returns application status, version, and environment.
    """
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow().isoformat() + "Z",
        version=settings.app_version,
        environment=settings.environment.value,
    )


@router.get("/health/live")
async def liveness() -> Dict[str, str]:
    """Liveness probe: 200 while the process is serving."""
    return {"status": "alive"}


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness(request: Request, response: Response) -> ReadinessResponse:
    """
    Readiness probe.

    Checks that the extractor can be called. An LLM extractor without a
    configured client reports not ready.
    """
    services = request.app.state.services
    checks: Dict[str, Any] = {}
    all_ready = True

    extractor_ready = bool(getattr(services.extractor, "is_available", True))
    checks["extractor"] = {
        "status": "ready" if extractor_ready else "not_configured",
        "type": type(services.extractor).__name__,
    }
    all_ready = all_ready and extractor_ready

    checks["gateway"] = {
        "status": "ready",
        "type": type(services.gateway).__name__,
    }

    if not all_ready:
        response.status_code = 503

    return ReadinessResponse(
        status="ready" if all_ready else "not_ready",
        checks=checks,
    )
