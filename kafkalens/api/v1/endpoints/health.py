"""Liveness and readiness endpoints."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from kafkalens.api.dependencies.rbac import get_access_control
from kafkalens.config.settings import settings
from kafkalens.core.logging import get_logger
from kafkalens.db.redis import ping_redis
from kafkalens.services.rbac import AccessControlService

logger = get_logger(__name__)

router = APIRouter()

APP_START_TIME = datetime.now(timezone.utc)


class HealthStatus(BaseModel):
    """Health check response model."""

    status: str = Field(..., description="Overall health status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    uptime_seconds: float = Field(..., description="Application uptime in seconds")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Application environment")
    checks: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class ReadinessStatus(BaseModel):
    """Readiness check response model."""

    ready: bool = Field(..., description="Whether the application is ready")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    checks: Dict[str, bool] = Field(default_factory=dict)
    message: Optional[str] = Field(None, description="Additional status message")


def rbac_health(access_control: AccessControlService) -> Dict[str, Any]:
    if not access_control.rbac_enabled:
        return {"status": "healthy", "message": "RBAC disabled, all access allowed"}
    return {
        "status": "healthy",
        "message": f"RBAC enabled with {len(access_control.roles)} roles",
    }


@router.get(
    settings.health_check_path,
    response_model=HealthStatus,
    summary="Health Check",
    description="Kubernetes liveness check endpoint",
)
async def health_check(
    access_control: AccessControlService = Depends(get_access_control),
) -> HealthStatus:
    uptime = (datetime.now(timezone.utc) - APP_START_TIME).total_seconds()

    return HealthStatus(
        status="healthy",
        uptime_seconds=uptime,
        version=settings.app_version,
        environment=settings.environment.value,
        checks={"rbac": rbac_health(access_control)},
    )


@router.get(
    settings.readiness_check_path,
    response_model=ReadinessStatus,
    responses={503: {"description": "Application is not ready"}},
    summary="Readiness Check",
    description="Kubernetes readiness check endpoint",
)
async def readiness_check(
    response: Response,
    access_control: AccessControlService = Depends(get_access_control),
) -> ReadinessStatus:
    checks = {"rbac_loaded": True}

    # Sessions are only read when access control is enabled
    if access_control.rbac_enabled:
        checks["session_store"] = await ping_redis()

    is_ready = all(checks.values())
    if not is_ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Readiness check failed", extra={"checks": checks})
        message = "Application not ready"
    else:
        message = "Application ready to receive traffic"

    return ReadinessStatus(ready=is_ready, checks=checks, message=message)
