"""
Wine Catalog Backend — Health Check Route
===========================================

What:  Health check endpoint for monitoring and container probes.
How:   Checks the database (SELECT 1) and the picture storage directory.

Status levels:
    - healthy:   database reachable, storage writable
    - degraded:  storage not writable (uploads fail, browsing works)
    - unhealthy: database unreachable
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from app import __version__
from app.database import engine
from app.schemas.common import HealthResponse
from app.services.file_service import file_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    storage_status = "writable"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    if not file_service.is_writable():
        storage_status = "unwritable"
        if overall != "unhealthy":
            overall = "degraded"
        logger.warning("Health check: storage not writable: %s", file_service.images_dir)

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        storage=storage_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
