"""
Redis admission strategy: per-event locks shared by every API process.

Circuit Breaker Pattern:
  If Redis cannot be reached while acquiring, the ledger falls back to the
  in-process lock for that attempt. The event row lock inside the admission
  transaction stays authoritative, so capacity still holds on PostgreSQL;
  only cross-process queueing moves from Redis into the database.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import redis.asyncio as redis
from redis.exceptions import LockError, RedisError

from ticketing.core.errors import AdmissionTimeoutError
from ticketing.core.logging import get_logger
from ticketing.core.metrics import redis_lock_errors
from ticketing.db.session import Database
from ticketing.services.entity_store import EntityStore
from ticketing.services.event_locks import EventLockRegistry
from ticketing.services.interfaces.capacity_ledger import CapacityLedger

logger = get_logger(__name__)

LOCK_KEY = "admission:{event_id}"


class RedisLockLedger(CapacityLedger):
    """
    Redis-based admission control.

    Use when:
    - several API processes book the same events
    - the database is not PostgreSQL, so there is no row lock to fall back on
    """

    strategy = "redis"

    def __init__(
        self,
        database: Database,
        store: EntityStore,
        redis_client: redis.Redis,
        lock_timeout: float,
        lock_lease: float,
        fallback: Optional[EventLockRegistry] = None,
    ) -> None:
        super().__init__(database, store, lock_timeout)
        self.redis = redis_client
        self._lock_lease = lock_lease
        self._fallback = fallback if fallback is not None else EventLockRegistry()

    @asynccontextmanager
    async def event_lock(self, event_id: int) -> AsyncIterator[None]:
        lock = self.redis.lock(
            LOCK_KEY.format(event_id=event_id),
            timeout=self._lock_lease,
            blocking_timeout=self._lock_timeout,
        )
        try:
            acquired = await lock.acquire()
        except RedisError as e:
            redis_lock_errors.labels(phase="acquire").inc()
            logger.warning("redis_admission_unavailable", event_id=event_id, error=str(e))
            async with self._fallback.hold(event_id, self._lock_timeout):
                yield
            return

        if not acquired:
            raise AdmissionTimeoutError(event_id, self._lock_timeout)

        try:
            yield
        finally:
            try:
                await lock.release()
            except (LockError, RedisError) as e:
                # Lease expired or Redis dropped; the admission transaction
                # has already ended and the key expires on its own.
                redis_lock_errors.labels(phase="release").inc()
                logger.warning("redis_lock_release_failed", event_id=event_id, error=str(e))
