"""
Shared pydantic helpers: wire-format timestamps and boundary validation.
"""

from datetime import datetime
from typing import Annotated, Any, Iterable, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, PlainSerializer
from pydantic import ValidationError as PydanticValidationError

from ticketing.core import datetime_codec
from ticketing.core.errors import ErrorCode, ValidationError


def _coerce_timestamp(value: Any) -> Any:
    if isinstance(value, (datetime, str, bytes, bytearray, memoryview)):
        try:
            return datetime_codec.coerce(value)
        except (TypeError, ValueError) as e:
            raise ValueError(str(e)) from e
    return value


# Accepts "YYYY-MM-DD HH:MM:SS", ISO 8601, datetime or packed bytes;
# serialized to JSON as "YYYY-MM-DD HH:MM:SS".
WireDateTime = Annotated[
    datetime,
    BeforeValidator(_coerce_timestamp),
    PlainSerializer(datetime_codec.format_wire, return_type=str, when_used="json"),
]

M = TypeVar("M", bound=BaseModel)


def validate_input(model: Type[M], data: Union[M, Mapping[str, Any]]) -> M:
    """Validate raw fields into an input model, raising the domain ValidationError."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise describe_errors(e.errors()) from None


def describe_errors(errors: Iterable[dict]) -> ValidationError:
    """Collapse pydantic error details into one domain ValidationError."""
    errors = list(errors)
    if any(err["type"] == "json_invalid" for err in errors):
        return ValidationError("Invalid JSON format")

    missing = [tuple(err["loc"]) for err in errors if err["type"] == "missing"]
    if missing:
        if missing == [("body",)]:
            return ValidationError("empty request body", code=ErrorCode.MISSING_FIELD)
        names = ", ".join(str(loc[-1]) for loc in missing)
        return ValidationError(f"Missing required fields: {names}", code=ErrorCode.MISSING_FIELD)

    first = errors[0]
    loc = tuple(first["loc"])
    if loc[:1] == ("query",):
        return ValidationError(f"{loc[-1]} must be a positive integer", code=ErrorCode.INVALID_ID)
    field = ".".join(str(part) for part in loc if part != "body")
    return ValidationError(f"Invalid value for {field}: {first['msg']}")
