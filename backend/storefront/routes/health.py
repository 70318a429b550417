"""
Storefront Backend: Health Check Route
========================================

GET /health probes the database with `SELECT 1` and reports which backend the
engine points at and how long the probe took.

    200 {"status": "healthy",   "database": "connected",    ...}
    503 {"status": "unhealthy", "database": "disconnected", ...}

The payload is not wrapped in the response envelope.
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from storefront import __version__
from storefront.deps import ApplicationDependencies, get_app_dependencies
from storefront.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_started_at = time.monotonic()


async def _probe_database(engine: AsyncEngine) -> Optional[float]:
    """Round-trip time of `SELECT 1` in milliseconds, or None if it failed."""
    began = time.perf_counter()
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health probe failed for %s: %s", engine.dialect.name, str(e))
        return None
    return round((time.perf_counter() - began) * 1000, 2)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    response: Response,
    deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> HealthResponse:
    latency_ms = await _probe_database(deps.engine)
    if latency_ms is None:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if latency_ms is not None else "unhealthy",
        version=__version__,
        database="connected" if latency_ms is not None else "disconnected",
        database_backend=deps.engine.dialect.name,
        database_latency_ms=latency_ms,
        uptime_seconds=round(time.monotonic() - _started_at, 2),
    )
