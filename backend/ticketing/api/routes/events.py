"""
Event endpoints: create, list upcoming, fetch by id, list issued tickets.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ticketing.api.deps import get_queries, get_store
from ticketing.core.datetime_codec import utcnow
from ticketing.schemas.event import EventCreate, EventCreated, EventResponse
from ticketing.schemas.ticket import TicketResponse
from ticketing.services.entity_store import EntityStore
from ticketing.services.query_service import QueryService

router = APIRouter(prefix="/event", tags=["Events"])


@router.post("", response_model=EventCreated)
async def create_event_endpoint(
    event_data: EventCreate,
    store: EntityStore = Depends(get_store),
):
    """Register an event. `max_tickets` is fixed from here on."""
    event = await store.create_event(event_data)
    return EventCreated(id=event.id)


@router.get("/current", response_model=list[EventResponse])
async def list_current_events_endpoint(queries: QueryService = Depends(get_queries)):
    """All events dated after now, soonest first."""
    return await queries.list_current_events(utcnow())


@router.get("/tickets", response_model=list[TicketResponse])
async def list_event_tickets_endpoint(
    event_id: Optional[int] = Query(None),
    queries: QueryService = Depends(get_queries),
):
    return await queries.list_tickets_for_event(event_id)


@router.get("", response_model=EventResponse)
async def get_event_endpoint(
    event_id: Optional[int] = Query(None),
    queries: QueryService = Depends(get_queries),
):
    """Single event by id. Cached, since events never change."""
    return await queries.get_event(event_id)
