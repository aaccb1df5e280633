from typing import Optional

from ticketing.core.errors import ErrorCode, ValidationError


def require_id(value: Optional[int], name: str) -> int:
    """Reject absent or non-positive identifiers."""
    if value is None:
        raise ValidationError(f"Missing {name} query parameter", code=ErrorCode.MISSING_FIELD)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{name} must be a positive integer", code=ErrorCode.INVALID_ID)
    return value
