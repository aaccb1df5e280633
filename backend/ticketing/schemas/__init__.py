from ticketing.schemas.event import EventCreate, EventResponse, EventCreated
from ticketing.schemas.user import UserCreate, UserResponse, UserCreated
from ticketing.schemas.ticket import TicketResponse, TicketReserved

__all__ = [
    "EventCreate", "EventResponse", "EventCreated",
    "UserCreate", "UserResponse", "UserCreated",
    "TicketResponse", "TicketReserved",
]
