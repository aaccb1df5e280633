"""
Redis cache for single-event lookups.

CACHING STRATEGY
================

What we cache:
  - GET /event?event_id= responses, keyed "event:{id}"

Why this is safe:
  - Events are never mutated or deleted once created, so a cached event
    can never be stale. The TTL only bounds memory.

What we never cache:
  - /event/current: its answer depends on the clock
  - ticket listings and counts: admission must always see live rows

The cache is advisory. Any Redis failure is logged and treated as a miss.
"""

import json
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ticketing.core.logging import get_logger
from ticketing.core.metrics import record_cache_operation

logger = get_logger(__name__)


def _event_key(event_id: int) -> str:
    return f"event:{event_id}"


class EventCache:
    def __init__(self, client: redis.Redis, ttl: int) -> None:
        self.client = client
        self.ttl = ttl

    async def get(self, event_id: int) -> Optional[dict]:
        key = _event_key(event_id)
        try:
            data = await self.client.get(key)
        except RedisError as e:
            record_cache_operation("get", "error")
            logger.error("cache_get_error", key=key, error=str(e))
            return None

        if data is None:
            record_cache_operation("get", "miss")
            logger.debug("cache_miss", key=key)
            return None

        record_cache_operation("get", "hit")
        logger.debug("cache_hit", key=key)
        return json.loads(data)

    async def set(self, event_id: int, data: dict) -> None:
        key = _event_key(event_id)
        try:
            await self.client.setex(key, self.ttl, json.dumps(data))
            record_cache_operation("set", "ok")
            logger.debug("cache_set", key=key, ttl=self.ttl)
        except RedisError as e:
            record_cache_operation("set", "error")
            logger.error("cache_set_error", key=key, error=str(e))

    async def stats(self) -> dict:
        """Redis cache statistics for monitoring."""
        try:
            info = await self.client.info("stats")
        except RedisError as e:
            return {"status": "error", "error": str(e)}

        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
