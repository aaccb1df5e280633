"""
Reservation engine: turns a (user, event) request into a ticket or a rejection.

Each attempt walks four steps:

  1. Validate  - both ids present and positive          -> BAD_REQUEST
  2. Resolve   - user and event exist (looked up in parallel)
                                                          -> UNKNOWN_REFERENCE
  3. Admit     - the capacity ledger checks capacity and inserts the ticket
                 as one unit under the event's lock       -> CAPACITY_EXCEEDED
  4. Respond   - ticket id and booking timestamp          -> RESERVED

Rejections come back as a ReservationOutcome. StoreError is a server-side
failure and propagates. Nothing is retried here: a capacity rejection is a
final answer for this attempt.
"""

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from ticketing.core import datetime_codec
from ticketing.core.errors import (
    CapacityExceededError,
    StoreError,
    TicketingError,
    UnknownReferenceError,
    ValidationError,
)
from ticketing.core.logging import get_logger
from ticketing.core.metrics import record_reservation, reservation_latency
from ticketing.models import Ticket
from ticketing.services.entity_store import EntityStore
from ticketing.services.interfaces.capacity_ledger import CapacityLedger
from ticketing.services.validation import require_id

logger = get_logger(__name__)


class ReservationStatus(str, Enum):
    RESERVED = "reserved"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    UNKNOWN_REFERENCE = "unknown_reference"
    BAD_REQUEST = "bad_request"


@dataclass(frozen=True)
class ReservationOutcome:
    status: ReservationStatus
    ticket: Optional[Ticket] = None
    error: Optional[TicketingError] = None

    @property
    def reserved(self) -> bool:
        return self.status is ReservationStatus.RESERVED

    def unwrap(self) -> Ticket:
        """Return the ticket, or raise the rejection."""
        if self.error is not None:
            raise self.error
        return self.ticket


class ReservationEngine:
    def __init__(
        self,
        store: EntityStore,
        ledger: CapacityLedger,
        clock: Callable[[], datetime] = datetime_codec.utcnow,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._clock = clock

    async def reserve(self, user_id: Optional[int], event_id: Optional[int]) -> ReservationOutcome:
        started = time.perf_counter()
        try:
            outcome = await self._attempt(user_id, event_id)
        except StoreError as e:
            record_reservation("error")
            logger.error(
                "reservation_failed",
                user_id=user_id,
                event_id=event_id,
                code=e.code.value,
                error=e.message,
            )
            raise
        finally:
            reservation_latency.observe(time.perf_counter() - started)

        record_reservation(outcome.status.value)
        if outcome.reserved:
            logger.info(
                "ticket_reserved",
                ticket_id=outcome.ticket.id,
                user_id=user_id,
                event_id=event_id,
                booking_date=datetime_codec.format_wire(outcome.ticket.booking_date),
            )
        else:
            logger.info(
                "reservation_rejected",
                user_id=user_id,
                event_id=event_id,
                status=outcome.status.value,
                code=outcome.error.code.value,
            )
        return outcome

    async def _attempt(self, user_id: Optional[int], event_id: Optional[int]) -> ReservationOutcome:
        try:
            user_id = require_id(user_id, "user_id")
            event_id = require_id(event_id, "event_id")
        except ValidationError as e:
            return ReservationOutcome(ReservationStatus.BAD_REQUEST, error=e)

        try:
            await self._resolve(user_id, event_id)
            ticket = await self._ledger.reserve(user_id, event_id, self._clock())
        except UnknownReferenceError as e:
            return ReservationOutcome(ReservationStatus.UNKNOWN_REFERENCE, error=e)
        except CapacityExceededError as e:
            return ReservationOutcome(ReservationStatus.CAPACITY_EXCEEDED, error=e)

        return ReservationOutcome(ReservationStatus.RESERVED, ticket=ticket)

    async def _resolve(self, user_id: int, event_id: int) -> None:
        user, event = await asyncio.gather(
            self._store.get_user(user_id),
            self._store.get_event(event_id),
        )
        if user is None:
            raise UnknownReferenceError.user(user_id)
        if event is None:
            raise UnknownReferenceError.event(event_id)
