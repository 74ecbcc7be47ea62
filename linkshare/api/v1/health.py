"""Health check endpoint with database connectivity check."""

from fastapi import APIRouter

from linkshare.api.deps import AppSettings, DbSession
from linkshare.core.database import check_db_connected
from linkshare.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: DbSession, settings: AppSettings) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        auth_mode=settings.AUTH_MODE,
        database=db_status,
    )
