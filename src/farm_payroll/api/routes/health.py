"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from farm_payroll import __version__
from farm_payroll.api.dependencies import DbSession
from farm_payroll.config import get_settings
from farm_payroll.models import Base, Employee

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    database: str
    version: str
    engine_version: str


class ReadinessResponse(BaseModel):
    status: str
    active_employees: int


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check(db: DbSession) -> HealthResponse:
    """Report API version and whether the database answers."""
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except (SQLAlchemyError, OSError):
        db_status = "unhealthy"

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        database=db_status,
        version=__version__,
        engine_version=get_settings().engine_version,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Schema missing or database unreachable"}},
)
async def readiness_check(db: DbSession) -> ReadinessResponse:
    """Ready once every payroll table exists and the roster can be read."""
    try:
        for table in Base.metadata.sorted_tables:
            await db.execute(select(func.count()).select_from(table))
        active = await db.scalar(
            select(func.count()).select_from(Employee).where(Employee.status == "ACTIVE")
        )
    except (SQLAlchemyError, OSError) as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database schema is not ready",
        ) from exc
    return ReadinessResponse(status="ready", active_employees=active or 0)


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    """Liveness check for container orchestration."""
    return {"status": "alive"}
