"""
Admission strategy factory.
Configures which capacity ledger backs the reservation engine.
"""

from typing import Optional

import redis.asyncio as redis

from ticketing.core.config import Settings
from ticketing.core.logging import get_logger
from ticketing.db.session import Database
from ticketing.services.admission_service import RedisLockLedger
from ticketing.services.entity_store import EntityStore
from ticketing.services.interfaces.capacity_ledger import CapacityLedger
from ticketing.services.interfaces.local_ledger import LocalLockLedger

logger = get_logger(__name__)


def create_ledger(
    settings: Settings,
    database: Database,
    store: EntityStore,
    redis_client: Optional[redis.Redis] = None,
) -> CapacityLedger:
    """
    Build the configured capacity ledger.

    - local: LocalLockLedger (default)
    - redis: RedisLockLedger, falling back to local when Redis is unavailable
    """
    if settings.ADMISSION_STRATEGY == "redis":
        if redis_client is not None:
            return RedisLockLedger(
                database,
                store,
                redis_client,
                lock_timeout=settings.ADMISSION_LOCK_TIMEOUT,
                lock_lease=settings.ADMISSION_LOCK_LEASE,
            )
        logger.warning("redis_ledger_unavailable", fallback="local")

    return LocalLockLedger(database, store, lock_timeout=settings.ADMISSION_LOCK_TIMEOUT)
