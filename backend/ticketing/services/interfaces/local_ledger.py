"""
Local admission strategy: per-event asyncio locks in this process.
"""

from typing import AsyncContextManager, Optional

from ticketing.db.session import Database
from ticketing.services.entity_store import EntityStore
from ticketing.services.event_locks import EventLockRegistry
from ticketing.services.interfaces.capacity_ledger import CapacityLedger


class LocalLockLedger(CapacityLedger):
    """
    Serializes admissions per event inside one process.

    Use when:
    - a single API process serves bookings, or
    - several processes share PostgreSQL, whose row lock then serializes
      them (the asyncio lock just keeps same-process callers off the pool)
    """

    strategy = "local"

    def __init__(
        self,
        database: Database,
        store: EntityStore,
        lock_timeout: float,
        locks: Optional[EventLockRegistry] = None,
    ) -> None:
        super().__init__(database, store, lock_timeout)
        self.locks = locks if locks is not None else EventLockRegistry()

    def event_lock(self, event_id: int) -> AsyncContextManager[None]:
        return self.locks.hold(event_id, self._lock_timeout)
