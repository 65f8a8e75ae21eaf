"""
Redis connection management.
Handles the shared async client used by producers and sweepers.
"""

import logging

from redis.asyncio import Redis

from delaytask.config import get_settings

logger = logging.getLogger(__name__)

# Global client instance
_redis: Redis | None = None


def create_redis(url: str | None = None) -> Redis:
    """
    Create a new async Redis client.

    Args:
        url: Redis URL. Defaults to the configured ``redis_url``.

    Returns:
        Redis: A pooled client returning ``str`` values.
    """
    settings = get_settings()
    return Redis.from_url(
        url or settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_connect_timeout,
        health_check_interval=30,
    )


async def get_redis() -> Redis:
    """
    Get or create the shared Redis client.

    Also usable as a FastAPI dependency.

    Returns:
        Redis: The shared client.
    """
    global _redis
    if _redis is None:
        _redis = create_redis()
    return _redis


async def init_redis() -> Redis:
    """
    Initialize the shared client and check the store is reachable.
    Should be called on application startup.
    """
    client = await get_redis()
    await client.ping()
    logger.info("Redis connection initialized")
    return client


async def close_redis() -> None:
    """
    Close the shared client.
    Should be called on application shutdown.
    """
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None
        logger.info("Redis connection closed")
