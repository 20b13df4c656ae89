# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.exceptions import PaymentConfigurationError
from core.services import PaymentGatewayConfig
from lib.supabase_client import SupabaseClient

router = APIRouter()

API_VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    database: str
    storage: str
    payments: str


class ReadinessResponse(BaseModel):
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health status for load balancers and monitoring."""
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Whether the service can serve requests.

    Probes the tasks table and the storage buckets and checks the PayHere
    settings. Reports "degraded" rather than failing so the readiness check itself
    never errors.
    """
    checks = ChecksResponse(database="unknown", storage="unknown", payments="unknown")

    try:
        client = SupabaseClient.get_client()
        client.table("tasks").select("id").limit(1).execute()
        checks.database = "healthy"
    except Exception as e:
        checks.database = f"unhealthy: {str(e)[:50]}"

    try:
        client = SupabaseClient.get_client()
        client.storage.list_buckets()
        checks.storage = "healthy"
    except Exception as e:
        checks.storage = f"unhealthy: {str(e)[:50]}"

    try:
        PaymentGatewayConfig.from_settings()
        checks.payments = "configured"
    except PaymentConfigurationError as e:
        checks.payments = f"missing: {', '.join(e.details['missing'])}"

    all_healthy = (
        checks.database == "healthy"
        and checks.storage == "healthy"
        and checks.payments == "configured"
    )

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """Whether the process is alive. Used for container restart decisions."""
    return LivenessResponse(status="alive", timestamp=_now())
