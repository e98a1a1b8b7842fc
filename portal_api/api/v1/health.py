"""Health check endpoint with database connectivity check."""

from datetime import UTC, datetime

from fastapi import APIRouter

from portal_api.api.v1.auth import AppSettings, DbSession
from portal_api.core.database import check_db_connected
from portal_api.schemas.health import HealthResponse

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
        database=db_status,
        timestamp=datetime.now(UTC),
    )
