"""Service status endpoint."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from paytrack.api.dependencies import AppSettings, DbSession

logger = logging.getLogger(__name__)

router = APIRouter(tags=["status"])


class StatusResponse(BaseModel):
    """``ok`` when the store answers, ``degraded`` otherwise."""

    status: str
    timestamp: datetime
    version: str
    database: str


@router.get("/health", response_model=StatusResponse)
async def status_check(db: DbSession, settings: AppSettings) -> StatusResponse:
    """Report whether PayTrack can reach its store."""
    reachable = True
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        reachable = False
        logger.warning("Store unreachable from status check", exc_info=True)

    return StatusResponse(
        status="ok" if reachable else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
        database="ok" if reachable else "unavailable",
    )
