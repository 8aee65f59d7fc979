"""
HotTakes API: Health Check Route
=================================

What:  GET /health for container health checks and load balancers.
How:   Runs SELECT 1 against the database. The service is only healthy
       when it can reach its database; unhealthy responses use 503 so a
       load balancer stops routing to this instance.
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from hottakes import __version__
from hottakes import database
from hottakes.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check():
    db_status = "connected"
    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        logger.warning("Health check: database unreachable: %s", e)

    report = HealthResponse(
        status="healthy" if db_status == "connected" else "unhealthy",
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if db_status != "connected":
        return JSONResponse(status_code=503, content=report.model_dump())
    return report
