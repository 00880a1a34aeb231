# =============================================================================
# app/routers/health.py - Health & Failure Policy Endpoints
# =============================================================================
# Liveness for load balancers, plus a status endpoint that reports which
# failure policy the running process is enforcing.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from app.config import get_settings

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class FailurePolicyStatus(BaseModel):
    """Service status with the active failure policy."""
    status: str = "healthy"
    timestamp: str = Field(default_factory=_now)
    environment: str
    failure_log: str | None = Field(
        default=None,
        description="Log file in use (None = host logging)"
    )
    expose_failures: bool
    verbose_failures: bool


class AliveStatus(BaseModel):
    status: str = "alive"
    timestamp: str = Field(default_factory=_now)


@router.get("/health", response_model=FailurePolicyStatus)
async def health_check(request: Request):
    """Report that the service is up and how its failures are handled."""
    config = request.app.state.interceptor.config

    return FailurePolicyStatus(
        environment=get_settings().ENVIRONMENT,
        failure_log=config.filename,
        expose_failures=config.expose_failures,
        verbose_failures=config.verbose_failures,
    )


@router.get("/health/live", response_model=AliveStatus)
async def liveness_check():
    return AliveStatus()
