"""
Redis client for admission locks and the event cache.
Created and closed by the application lifespan; never a module singleton.
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ticketing.core.config import Settings
from ticketing.core.logging import get_logger

logger = get_logger(__name__)


async def create_redis(settings: Settings) -> Optional[redis.Redis]:
    """Connect to Redis. Returns None if Redis is disabled or unreachable."""
    if not settings.REDIS_ENABLED:
        return None

    client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
        health_check_interval=30,
    )
    try:
        await client.ping()
    except RedisError as e:
        logger.error("redis_connection_failed", url=settings.REDIS_URL, error=str(e))
        await client.aclose()
        return None

    logger.info("redis_connected", url=settings.REDIS_URL)
    return client


async def close_redis(client: Optional[redis.Redis]) -> None:
    if client is not None:
        await client.aclose()
