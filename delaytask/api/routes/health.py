"""
Health check routes.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from redis.asyncio import Redis
from redis.exceptions import RedisError

from delaytask import __version__
from delaytask.observability.metrics import get_metrics
from delaytask.store import get_redis
from delaytask.types.api import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health of the API and Redis connection.",
)
async def health_check(
    redis: Redis = Depends(get_redis),
) -> HealthResponse:
    """
    Perform a health check.

    Pings Redis and returns service status.

    Args:
        redis: Redis client.

    Returns:
        HealthResponse with service status.
    """
    redis_status = "healthy"
    try:
        await redis.ping()
    except RedisError:
        redis_status = "unhealthy"

    return HealthResponse(
        status="healthy" if redis_status == "healthy" else "degraded",
        version=__version__,
        redis=redis_status,
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the service is ready to receive traffic.",
)
async def readiness_check(
    redis: Redis = Depends(get_redis),
) -> dict:
    """
    Kubernetes readiness probe endpoint.

    Args:
        redis: Redis client.

    Returns:
        Ready status.
    """
    try:
        await redis.ping()
        return {"ready": True}
    except RedisError:
        return {"ready": False}


@router.get(
    "/live",
    summary="Liveness check",
    description="Check if the service is alive.",
)
async def liveness_check() -> dict:
    """Kubernetes liveness probe endpoint."""
    return {"alive": True}


@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="Expose Prometheus metrics.",
)
async def metrics() -> Response:
    """
    Expose Prometheus metrics.

    Returns:
        Prometheus-formatted metrics.
    """
    metrics_collector = get_metrics()
    return Response(
        content=metrics_collector.get_metrics(),
        media_type=metrics_collector.get_content_type(),
    )
