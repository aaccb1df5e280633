from ticketing.models.event import Event
from ticketing.models.user import User
from ticketing.models.ticket import Ticket

__all__ = ["Event", "User", "Ticket"]
