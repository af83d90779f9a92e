"""Health check endpoint."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from staff_payroll import __version__
from staff_payroll.api.dependencies import DbSession
from staff_payroll.models import StaffMember

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service status with the roster size seen by the database."""

    status: str
    version: str
    timestamp: datetime
    database: str
    active_staff: int | None = None


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check(db: DbSession) -> HealthResponse:
    """Report degraded when the roster cannot be read."""
    try:
        active = await db.scalar(
            select(func.count()).select_from(StaffMember).where(StaffMember.is_active.is_(True))
        )
    except SQLAlchemyError:
        logger.warning("Health check could not read the staff roster", exc_info=True)
        return HealthResponse(
            status="degraded",
            version=__version__,
            timestamp=datetime.now(timezone.utc),
            database="unhealthy",
        )

    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        database="healthy",
        active_staff=active,
    )
