"""Database reachability probe.

Always answers 200: connectivity failures are reported in the body so that
clients can tell "backend down" apart from "database down".
"""
import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import check_database_connection, get_db

logger = logging.getLogger(__name__)

router = APIRouter()


class DatabaseHealthResponse(BaseModel):
    """Database health response."""

    connected: bool
    timestamp: str
    error: str | None = None


@router.get("/database", response_model=DatabaseHealthResponse, response_model_exclude_none=True)
async def database_health(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DatabaseHealthResponse:
    """Report whether the database answers a trivial query."""
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        connected = await check_database_connection(db)
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return DatabaseHealthResponse(
            connected=False,
            timestamp=timestamp,
            error="Connection check failed",
        )

    return DatabaseHealthResponse(connected=connected, timestamp=timestamp)
