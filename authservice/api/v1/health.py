"""
Health check endpoints for API v1.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from authservice.api.dependencies.services import get_app_settings, get_auth_service
from authservice.core.config import Settings
from authservice.schemas.response import HealthCheckResponse
from authservice.services.auth import AuthService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthCheckResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings)
) -> HealthCheckResponse:
    """
    Liveness check. Does not touch any dependency.
    """
    return HealthCheckResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        service=settings.APP_NAME
    )


@router.get("/ready", response_model=HealthCheckResponse)
async def readiness_check(
    settings: Settings = Depends(get_app_settings),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Readiness check.
    Pings Redis and the database; answers 503 if either is down.
    """
    checks = await auth_service.check_dependencies()
    healthy = all(checks.values())

    body = HealthCheckResponse(
        status="healthy" if healthy else "unhealthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        service=settings.APP_NAME,
        details={name: "healthy" if ok else "unhealthy" for name, ok in checks.items()}
    )
    if healthy:
        return body
    return JSONResponse(status_code=503, content=body.model_dump(mode="json"))
