"""
Diary Backend — Health Check Route
====================================

What:  Health check endpoint for monitoring and container probes.
How:   Pings the store through the Database handle on app.state.
Who:   Called by Docker health checks and uptime monitors.

Status levels:
    - healthy:   store reachable (HTTP 200)
    - unhealthy: store unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from diary import __version__
from diary.schemas.entry import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request):
    """
    Check the health of the service and its store.

    Database: executes SELECT 1 through the app's Database handle.
    """
    db_ok = await request.app.state.database.ping()
    if not db_ok:
        logger.warning("Health check: database unreachable")

    body = HealthResponse(
        status="healthy" if db_ok else "unhealthy",
        version=__version__,
        database="connected" if db_ok else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(status_code=200 if db_ok else 503, content=body.model_dump())
