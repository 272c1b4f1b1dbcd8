"""
Health check endpoint for monitoring and load balancer checks.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from ..core.constants import API_TITLE, API_VERSION
from ..schemas.place import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness plus which providers have credentials; never calls upstreams."""
    cfg = request.app.state.settings
    service = getattr(request.app.state, "place_search_service", None)
    providers = (
        {p.source.value: p.is_configured() for p in service.providers} if service is not None else {}
    )
    return HealthResponse(
        status="healthy",
        service=API_TITLE,
        version=API_VERSION,
        environment=cfg.environment,
        providers=providers,
    )
