"""
Pydantic schemas for event-related request/response validation.
"""

from pydantic import BaseModel, Field

from ticketing.schemas.common import WireDateTime


class EventCreate(BaseModel):
    event_name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    date: WireDateTime
    max_tickets: int = Field(..., ge=0)
    type: str = Field(..., min_length=1, max_length=100)

    model_config = {"str_strip_whitespace": True}


class EventResponse(BaseModel):
    id: int
    event_name: str
    location: str
    date: WireDateTime
    max_tickets: int
    type: str

    model_config = {"from_attributes": True}


class EventCreated(BaseModel):
    message: str = "Event created successfully!"
    id: int
