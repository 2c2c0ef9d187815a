"""Health check endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from ugc_engine.api.deps import RateLimiterDep, SettingsDep

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    components: dict[str, bool] | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    webhook_configured: bool
    tracked_clients: int


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Basic health check endpoint that verifies the API is running.",
)
async def health_check(app_settings: SettingsDep) -> HealthResponse:
    """Is the API up, and which proxy settings are present?"""
    from ugc_engine import __version__

    return HealthResponse(
        status="healthy",
        version=__version__,
        components={
            "webhook": bool(app_settings.webhook_url),
            "webhook_secret": bool(app_settings.webhook_secret),
        },
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Ready once a webhook URL is configured; the proxy returns 500 without one.",
)
async def readiness_check(
    app_settings: SettingsDep,
    limiter: RateLimiterDep,
) -> ReadinessResponse:
    webhook_configured = bool(app_settings.webhook_url)
    return ReadinessResponse(
        ready=webhook_configured,
        webhook_configured=webhook_configured,
        tracked_clients=len(limiter),
    )


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    description="Simple liveness probe for Kubernetes.",
)
async def liveness_check() -> dict[str, str]:
    """Kubernetes liveness probe - is the process alive?"""
    return {"status": "alive"}
