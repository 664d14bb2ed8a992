# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.dependencies import RateLimiterDep, SettingsDep, SupabaseDep, cors

router = APIRouter()

VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str
    rate_limit_store: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    dependencies=[Depends(cors("GET"))],
)
async def health_check(settings: SettingsDep):
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=VERSION,
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    dependencies=[Depends(cors("GET"))],
)
async def readiness_check(client: SupabaseDep, limiter: RateLimiterDep):
    """
    Readiness check endpoint.

    Checks database and rate-limit store connectivity. A missing rate-limit
    store is reported as "disabled" and does not make the service degraded.
    """
    checks = ChecksResponse(database="unknown", rate_limit_store="unknown")

    # Check database
    try:
        client.table("stations").select("id").limit(1).execute()
        checks.database = "healthy"
    except Exception as e:
        checks.database = f"unhealthy: {str(e)[:50]}"

    # Check rate-limit store
    if limiter is None:
        checks.rate_limit_store = "disabled"
    else:
        try:
            limiter.client.ping()
            checks.rate_limit_store = "healthy"
        except Exception as e:
            checks.rate_limit_store = f"unhealthy: {str(e)[:50]}"

    all_healthy = checks.database == "healthy" and checks.rate_limit_store in ("healthy", "disabled")

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get(
    "/health/live",
    response_model=LivenessResponse,
    dependencies=[Depends(cors("GET"))],
)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )
