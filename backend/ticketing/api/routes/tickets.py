"""
Ticket endpoints with capacity-safe reservation.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ticketing.api.deps import get_queries, get_reservations
from ticketing.schemas.ticket import TicketReserved, TicketResponse
from ticketing.services.query_service import QueryService
from ticketing.services.reservation_service import ReservationEngine

router = APIRouter(prefix="/ticket", tags=["Tickets"])


@router.post("", response_model=TicketReserved)
async def reserve_ticket_endpoint(
    user_id: Optional[int] = Query(None),
    event_id: Optional[int] = Query(None),
    reservations: ReservationEngine = Depends(get_reservations),
):
    """
    Issue one ticket for the event.

    Concurrent requests for the same event are admitted one at a time, so
    the event never sells more than `max_tickets`. A full event answers 400
    with CAPACITY_EXCEEDED; retrying is a fresh attempt.
    """
    outcome = await reservations.reserve(user_id, event_id)
    ticket = outcome.unwrap()
    return TicketReserved(
        ticket_id=ticket.id,
        user_id=ticket.user_id,
        event_id=ticket.event_id,
        booking_date=ticket.booking_date,
    )


@router.get("", response_model=list[TicketResponse])
async def list_user_tickets_endpoint(
    user_id: Optional[int] = Query(None),
    queries: QueryService = Depends(get_queries),
):
    """All tickets held by one user."""
    return await queries.list_tickets_for_user(user_id)
