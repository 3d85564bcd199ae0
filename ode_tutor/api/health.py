"""
ode_tutor/api/health.py

GET /api/health — liveness check for the hint backend.

Does not call the provider (every check would cost a completion); it only
reports which one is configured.
"""

from fastapi import APIRouter, Request

from ode_tutor.core.config import Settings
from ode_tutor.core.logging import get_logger
from ode_tutor.schemas.hint import HealthResponse

logger = get_logger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse, summary="Backend health check")
async def health_check(request: Request) -> HealthResponse:
    settings: Settings = request.app.state.settings

    logger.debug("health_check", provider=settings.ai_provider)

    return HealthResponse(
        status="ok",
        version=settings.app_version,
        environment=settings.environment,
        provider=settings.ai_provider,
    )
