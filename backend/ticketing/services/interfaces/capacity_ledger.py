"""
Capacity ledger interface.

A ledger decides whether an event still has a free slot and, if so,
issues the ticket, as one indivisible admission unit:

    acquire the event's admission lock
      BEGIN
        SELECT event ... FOR UPDATE
        SELECT count(*) FROM ticket WHERE event_id = :event_id
        INSERT INTO ticket ...            (only if count < max_tickets)
      COMMIT
    release the lock

Implementations differ only in how the per-event lock is taken. The row
lock inside the transaction keeps separate worker processes correct on
PostgreSQL even when the outer lock is process-local.
"""

import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import AsyncContextManager

from ticketing.core.errors import AdmissionTimeoutError, CapacityExceededError, UnknownReferenceError
from ticketing.core.logging import get_logger
from ticketing.core.metrics import admission_lock_wait, admission_timeouts
from ticketing.db.session import Database
from ticketing.models import Ticket
from ticketing.services.entity_store import EntityStore, store_errors

logger = get_logger(__name__)


class CapacityLedger(ABC):
    """
    Interface for admission control strategies.

    Implementations:
    - LocalLockLedger: per-event asyncio locks in this process
    - RedisLockLedger: per-event Redis locks shared by all processes
    """

    strategy: str = "abstract"

    def __init__(self, database: Database, store: EntityStore, lock_timeout: float) -> None:
        self._database = database
        self._store = store
        self._lock_timeout = lock_timeout

    @abstractmethod
    def event_lock(self, event_id: int) -> AsyncContextManager[None]:
        """
        Mutual exclusion for admissions against one event.

        Must never be shared between different events, and must raise
        AdmissionTimeoutError instead of waiting past the lock timeout.
        """

    async def reserve(self, user_id: int, event_id: int, booking_date: datetime) -> Ticket:
        """
        Issue a ticket if the event has capacity left.

        Raises:
            CapacityExceededError: the event is full
            UnknownReferenceError: user or event does not exist
            StoreError: storage failure or admission timeout; nothing was written
        """
        wait_started = time.perf_counter()
        try:
            async with self.event_lock(event_id):
                admission_lock_wait.labels(strategy=self.strategy).observe(
                    time.perf_counter() - wait_started
                )
                return await self._admit(user_id, event_id, booking_date)
        except AdmissionTimeoutError:
            admission_timeouts.labels(strategy=self.strategy).inc()
            logger.warning("admission_timeout", event_id=event_id, strategy=self.strategy)
            raise

    async def _admit(self, user_id: int, event_id: int, booking_date: datetime) -> Ticket:
        with store_errors("admit", event_id=event_id, user_id=user_id):
            async with self._database.session() as session:
                async with session.begin():
                    event = await self._store.lock_event(session, event_id)
                    if event is None:
                        raise UnknownReferenceError.event(event_id)

                    issued = await self._store.count_tickets_for_event(event_id, session=session)
                    if issued >= event.max_tickets:
                        logger.info(
                            "admission_rejected",
                            event_id=event_id,
                            user_id=user_id,
                            issued=issued,
                            max_tickets=event.max_tickets,
                        )
                        raise CapacityExceededError(event_id, event.max_tickets)

                    ticket = await self._store.create_ticket(session, user_id, event_id, booking_date)

        logger.info(
            "admission_granted",
            ticket_id=ticket.id,
            event_id=event_id,
            user_id=user_id,
            remaining=event.max_tickets - issued - 1,
            strategy=self.strategy,
        )
        return ticket
