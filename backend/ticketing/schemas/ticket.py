"""
Pydantic schemas for ticket responses. Tickets have no create schema:
they are issued by the reservation engine from query parameters.
"""

from pydantic import BaseModel

from ticketing.schemas.common import WireDateTime


class TicketResponse(BaseModel):
    id: int
    user_id: int
    event_id: int
    booking_date: WireDateTime

    model_config = {"from_attributes": True}


class TicketReserved(BaseModel):
    message: str = "Ticket created successfully!"
    ticket_id: int
    user_id: int
    event_id: int
    booking_date: WireDateTime
