"""
Health check API endpoints.

Endpoints:
    - GET /health/liveness: Basic liveness check (is service running?)
    - GET /health/readiness: Readiness check (is the store reachable?)
    - GET /health/detailed: Component checks plus crawl pool counters
"""

import logging
import os
import time
from datetime import datetime
from typing import Dict, List, Optional, Union

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from feedback_crawler.__version__ import __version__

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

# Track service start time for uptime calculation
SERVICE_START_TIME = datetime.utcnow()


class HealthStatus(BaseModel):
    """Health status response model."""

    status: str
    timestamp: str
    version: Optional[str] = None


class ComponentHealth(BaseModel):
    """Individual component health status."""

    name: str
    status: str
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class DetailedHealthStatus(BaseModel):
    """Detailed health status with component checks."""

    status: str
    timestamp: str
    version: str
    uptime_seconds: float
    components: List[ComponentHealth]
    crawl_pool: Optional[Dict[str, Union[int, bool]]] = None
    environment: Optional[str] = None


def _get_app_state():
    """Lazy import to avoid circular dependency with app.main."""
    from app.main import app_state

    return app_state


async def check_database_health() -> ComponentHealth:
    """
    Check Supabase connectivity by counting stored feedback items.

    Returns:
        ComponentHealth with database status and latency.
    """
    start_time = time.time()
    client = _get_app_state().db_client
    if client is None:
        return ComponentHealth(
            name="database",
            status="unhealthy",
            message="Supabase client not initialized",
        )

    try:
        count = await client.count_feedback_items()
        latency_ms = (time.time() - start_time) * 1000
        return ComponentHealth(
            name="database",
            status="healthy",
            latency_ms=round(latency_ms, 2),
            message=f"{count} feedback items stored",
        )
    except Exception as e:
        latency_ms = (time.time() - start_time) * 1000
        logger.warning(f"Database health check failed: {e}")
        return ComponentHealth(
            name="database",
            status="degraded",
            latency_ms=round(latency_ms, 2),
            message=f"Connection issue: {str(e)[:100]}",
        )


def check_crawler_health() -> ComponentHealth:
    """Report whether the crawler is ready and how loaded its pool is."""
    pool = _get_app_state().pool
    if pool is None:
        return ComponentHealth(name="crawler", status="unhealthy", message="Crawler not initialized")

    if pool.active >= pool.max_sessions and pool.waiting >= pool.max_waiting:
        return ComponentHealth(
            name="crawler",
            status="degraded",
            message="All crawl slots busy and waiting room full",
        )
    return ComponentHealth(
        name="crawler",
        status="healthy",
        message=f"{pool.active}/{pool.max_sessions} crawl slots in use",
    )


@router.get("/liveness", response_model=HealthStatus)
async def liveness():
    """
    Basic liveness check - is the service running?

    Returns:
        HealthStatus with "alive" status.
    """
    return HealthStatus(
        status="alive",
        timestamp=datetime.utcnow().isoformat(),
        version=__version__,
    )


@router.get("/readiness", response_model=HealthStatus)
async def readiness(response: Response):
    """
    Readiness check - can the service handle crawl requests?

    Returns:
        HealthStatus with "ready" or "not_ready" status.
        Returns 503 if not ready.
    """
    db_health = await check_database_health()
    crawler_health = check_crawler_health()

    is_ready = db_health.status == "healthy" and crawler_health.status != "unhealthy"

    if not is_ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthStatus(
            status="not_ready",
            timestamp=datetime.utcnow().isoformat(),
            version=__version__,
        )

    return HealthStatus(
        status="ready",
        timestamp=datetime.utcnow().isoformat(),
        version=__version__,
    )


@router.get("/detailed", response_model=DetailedHealthStatus)
async def detailed_health():
    """
    Detailed health status with all component checks.

    Returns:
        DetailedHealthStatus with component-level health information.
    """
    uptime = (datetime.utcnow() - SERVICE_START_TIME).total_seconds()

    components = [
        await check_database_health(),
        check_crawler_health(),
    ]

    unhealthy_count = sum(1 for c in components if c.status == "unhealthy")
    degraded_count = sum(1 for c in components if c.status == "degraded")

    if unhealthy_count > 0:
        overall_status = "unhealthy"
    elif degraded_count > 0:
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    pool = _get_app_state().pool
    return DetailedHealthStatus(
        status=overall_status,
        timestamp=datetime.utcnow().isoformat(),
        version=__version__,
        uptime_seconds=round(uptime, 2),
        components=components,
        crawl_pool=pool.stats() if pool else None,
        environment=os.getenv("ENVIRONMENT", "development"),
    )
