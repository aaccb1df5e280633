"""
Entity store: durable create/read/query operations for events, users and tickets.

Each public operation runs in its own short-lived session drawn from the
Database's pool, except the admission-time helpers (`lock_event`,
`count_tickets_for_event`, `create_ticket`) which take the caller's session
so they join the ledger's admission transaction.

SQLAlchemy failures never escape this module raw: they are logged and
re-raised as StoreError.
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Mapping, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ticketing.core.errors import StoreError, UnknownReferenceError
from ticketing.core.logging import get_logger
from ticketing.core.metrics import record_store_error
from ticketing.db.session import Database
from ticketing.models import Event, Ticket, User
from ticketing.schemas.common import validate_input
from ticketing.schemas.event import EventCreate
from ticketing.schemas.user import UserCreate

logger = get_logger(__name__)


@contextmanager
def store_errors(operation: str, **context: Any) -> Iterator[None]:
    """Translate SQLAlchemy failures into StoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        record_store_error(operation)
        logger.error("store_error", operation=operation, error=str(e), **context)
        raise StoreError() from e


class EntityStore:
    def __init__(self, database: Database) -> None:
        self._database = database

    # Writes

    async def create_event(self, data: Union[EventCreate, Mapping[str, Any]]) -> Event:
        event_data = validate_input(EventCreate, data)
        event = Event(**event_data.model_dump())

        with store_errors("create_event"):
            async with self._database.session() as session:
                async with session.begin():
                    session.add(event)

        logger.info(
            "event_created",
            event_id=event.id,
            event_name=event.event_name,
            max_tickets=event.max_tickets,
        )
        return event

    async def create_user(self, data: Union[UserCreate, Mapping[str, Any]]) -> User:
        user_data = validate_input(UserCreate, data)
        user = User(**user_data.model_dump())

        with store_errors("create_user"):
            async with self._database.session() as session:
                async with session.begin():
                    session.add(user)

        logger.info("user_created", user_id=user.id, rol=user.rol)
        return user

    async def create_ticket(
        self,
        session: AsyncSession,
        user_id: int,
        event_id: int,
        booking_date: datetime,
    ) -> Ticket:
        """
        Insert a ticket inside the caller's admission transaction.

        Only a capacity ledger may call this, after it has taken the
        event's admission lock and checked capacity in the same transaction.
        """
        if await session.get(User, user_id) is None:
            raise UnknownReferenceError.user(user_id)
        if await session.get(Event, event_id) is None:
            raise UnknownReferenceError.event(event_id)

        ticket = Ticket(user_id=user_id, event_id=event_id, booking_date=booking_date)
        session.add(ticket)
        await session.flush()
        return ticket

    # Admission-time reads

    async def lock_event(self, session: AsyncSession, event_id: int) -> Optional[Event]:
        """Load an event and hold its row lock until the transaction ends (no-op on SQLite)."""
        result = await session.execute(
            select(Event)
            .where(Event.id == event_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def count_tickets_for_event(
        self,
        event_id: int,
        session: Optional[AsyncSession] = None,
    ) -> int:
        query = select(func.count(Ticket.id)).where(Ticket.event_id == event_id)
        if session is not None:
            return (await session.execute(query)).scalar_one()

        with store_errors("count_tickets_for_event", event_id=event_id):
            async with self._database.session() as session:
                return (await session.execute(query)).scalar_one()

    # Reads

    async def get_event(self, event_id: int) -> Optional[Event]:
        with store_errors("get_event", event_id=event_id):
            async with self._database.session() as session:
                return await session.get(Event, event_id)

    async def get_user(self, user_id: int) -> Optional[User]:
        with store_errors("get_user", user_id=user_id):
            async with self._database.session() as session:
                return await session.get(User, user_id)

    async def list_events_after(self, timestamp: datetime) -> list[Event]:
        """Events strictly after `timestamp`, soonest first."""
        with store_errors("list_events_after"):
            async with self._database.session() as session:
                result = await session.execute(
                    select(Event)
                    .where(Event.date > timestamp)
                    .order_by(Event.date.asc(), Event.id.asc())
                )
                return list(result.scalars().all())

    async def list_tickets_for_user(self, user_id: int) -> list[Ticket]:
        with store_errors("list_tickets_for_user", user_id=user_id):
            async with self._database.session() as session:
                result = await session.execute(
                    select(Ticket).where(Ticket.user_id == user_id).order_by(Ticket.id.asc())
                )
                return list(result.scalars().all())

    async def list_tickets_for_event(self, event_id: int) -> list[Ticket]:
        with store_errors("list_tickets_for_event", event_id=event_id):
            async with self._database.session() as session:
                result = await session.execute(
                    select(Ticket).where(Ticket.event_id == event_id).order_by(Ticket.id.asc())
                )
                return list(result.scalars().all())
