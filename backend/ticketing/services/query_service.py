"""
Read-side operations: upcoming events, single lookups, ticket listings.

Results are shaped into response schemas. Nothing here writes.
"""

from datetime import datetime
from typing import Optional

from ticketing.core.errors import NotFoundError
from ticketing.schemas.event import EventResponse
from ticketing.schemas.ticket import TicketResponse
from ticketing.schemas.user import UserResponse
from ticketing.services.cache_service import EventCache
from ticketing.services.entity_store import EntityStore
from ticketing.services.validation import require_id


class QueryService:
    def __init__(self, store: EntityStore, cache: Optional[EventCache] = None) -> None:
        self._store = store
        self._cache = cache

    async def list_current_events(self, now: datetime) -> list[EventResponse]:
        """Events dated strictly after `now` (the caller's clock)."""
        events = await self._store.list_events_after(now)
        return [EventResponse.model_validate(e) for e in events]

    async def get_event(self, event_id: Optional[int]) -> EventResponse:
        event_id = require_id(event_id, "event_id")

        if self._cache is not None:
            cached = await self._cache.get(event_id)
            if cached is not None:
                return EventResponse.model_validate(cached)

        event = await self._store.get_event(event_id)
        if event is None:
            raise NotFoundError.event(event_id)

        response = EventResponse.model_validate(event)
        if self._cache is not None:
            await self._cache.set(event_id, response.model_dump(mode="json"))
        return response

    async def get_user(self, user_id: Optional[int]) -> UserResponse:
        user_id = require_id(user_id, "user_id")
        user = await self._store.get_user(user_id)
        if user is None:
            raise NotFoundError.user(user_id)
        return UserResponse.model_validate(user)

    async def list_tickets_for_user(self, user_id: Optional[int]) -> list[TicketResponse]:
        user_id = require_id(user_id, "user_id")
        if await self._store.get_user(user_id) is None:
            raise NotFoundError.user(user_id)

        tickets = await self._store.list_tickets_for_user(user_id)
        return [TicketResponse.model_validate(t) for t in tickets]

    async def list_tickets_for_event(self, event_id: Optional[int]) -> list[TicketResponse]:
        event_id = require_id(event_id, "event_id")
        if await self._store.get_event(event_id) is None:
            raise NotFoundError.event(event_id)

        tickets = await self._store.list_tickets_for_event(event_id)
        return [TicketResponse.model_validate(t) for t in tickets]
