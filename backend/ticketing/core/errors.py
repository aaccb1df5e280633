"""
Error taxonomy for the booking core.

Every error carries an ErrorCode naming the invariant that failed, so the
HTTP layer can map it to a status code without re-deriving the cause.
"""

from enum import Enum


class ErrorCode(str, Enum):
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_FIELD = "INVALID_FIELD"
    INVALID_ID = "INVALID_ID"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    STORE_ERROR = "STORE_ERROR"
    ADMISSION_TIMEOUT = "ADMISSION_TIMEOUT"


class TicketingError(Exception):
    """Base error with a code and a user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(TicketingError):
    """Malformed or missing input. Caller's fault, never retried."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_FIELD) -> None:
        super().__init__(code, message)


class UnknownReferenceError(TicketingError):
    """A reservation names a user or event that does not exist."""

    def __init__(self, code: ErrorCode, entity_id: int) -> None:
        entity = "user" if code == ErrorCode.USER_NOT_FOUND else "event"
        super().__init__(code, f"{entity} not found")
        self.entity_id = entity_id

    @classmethod
    def user(cls, user_id: int) -> "UnknownReferenceError":
        return cls(ErrorCode.USER_NOT_FOUND, user_id)

    @classmethod
    def event(cls, event_id: int) -> "UnknownReferenceError":
        return cls(ErrorCode.EVENT_NOT_FOUND, event_id)


class NotFoundError(TicketingError):
    """A single-entity lookup by id found nothing."""

    def __init__(self, code: ErrorCode, entity_id: int, message: str) -> None:
        super().__init__(code, message)
        self.entity_id = entity_id

    @classmethod
    def user(cls, user_id: int) -> "NotFoundError":
        return cls(ErrorCode.USER_NOT_FOUND, user_id, "User does not exist")

    @classmethod
    def event(cls, event_id: int) -> "NotFoundError":
        return cls(ErrorCode.EVENT_NOT_FOUND, event_id, "Event id does not exist")


class CapacityExceededError(TicketingError):
    """The event has no free slot left. A business outcome, not a fault."""

    def __init__(self, event_id: int, max_tickets: int) -> None:
        super().__init__(
            ErrorCode.CAPACITY_EXCEEDED,
            "No tickets available for this event",
        )
        self.event_id = event_id
        self.max_tickets = max_tickets


class StoreError(TicketingError):
    """Storage or transport failure. May be transient."""

    def __init__(self, message: str = "Database error", code: ErrorCode = ErrorCode.STORE_ERROR) -> None:
        super().__init__(code, message)


class AdmissionTimeoutError(StoreError):
    """The per-event admission lock could not be acquired in time."""

    def __init__(self, event_id: int, timeout: float) -> None:
        super().__init__(
            f"Timed out after {timeout}s waiting for admission",
            code=ErrorCode.ADMISSION_TIMEOUT,
        )
        self.event_id = event_id
