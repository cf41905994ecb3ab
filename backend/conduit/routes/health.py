"""
Conduit Backend — Health Check Route
======================================

What:  Liveness endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 on the request's session and reports uptime.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

Mounted without the API prefix: GET /health.
"""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from conduit import __version__
from conduit.database import get_db_session
from conduit.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Process start, for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(db: AsyncSession = Depends(get_db_session)) -> HealthResponse:
    """
    Always 200 while the server is up; a failing database probe is reported
    as database="disconnected" rather than failing the check.
    """
    db_status = "connected"
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
