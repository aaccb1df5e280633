"""
Datetime encoding between the wire, storage and Python.

Wire form:   "YYYY-MM-DD HH:MM:SS"
Packed form: year as little-endian uint16, then one byte each for
             month, day, hour, minute, second (7 bytes).

All datetimes handled by the service are naive UTC.
"""

import struct
from datetime import datetime, timezone
from typing import Union

WIRE_FORMAT = "%Y-%m-%d %H:%M:%S"

_PACKED = struct.Struct("<HBBBBB")
PACKED_SIZE = _PACKED.size
# year + month + day; trailing time bytes may be omitted and read as zero
_MIN_PACKED_SIZE = 4


def utcnow() -> datetime:
    """Current time as naive UTC, truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def normalize(value: datetime) -> datetime:
    """Drop timezone (converting to UTC) and sub-second precision."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=0)


def format_wire(value: datetime) -> str:
    return normalize(value).strftime(WIRE_FORMAT)


def parse_wire(text: str) -> datetime:
    """Parse the wire form. ISO 8601 input ("T" separator, offsets) is accepted too."""
    text = text.strip()
    try:
        return datetime.strptime(text, WIRE_FORMAT)
    except ValueError:
        pass
    try:
        return normalize(datetime.fromisoformat(text))
    except ValueError:
        raise ValueError(f"invalid datetime {text!r}, expected YYYY-MM-DD HH:MM:SS") from None


def pack(value: datetime) -> bytes:
    value = normalize(value)
    return _PACKED.pack(
        value.year, value.month, value.day,
        value.hour, value.minute, value.second,
    )


def unpack(raw: bytes) -> datetime:
    if len(raw) < _MIN_PACKED_SIZE:
        raise ValueError(f"packed datetime needs at least {_MIN_PACKED_SIZE} bytes, got {len(raw)}")
    padded = bytes(raw[:PACKED_SIZE]).ljust(PACKED_SIZE, b"\x00")
    return datetime(*_PACKED.unpack(padded))


def coerce(value: Union[datetime, str, bytes, bytearray, memoryview]) -> datetime:
    """Turn any stored or transmitted representation into a naive UTC datetime."""
    if isinstance(value, datetime):
        return normalize(value)
    if isinstance(value, str):
        return parse_wire(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return unpack(bytes(value))
    raise TypeError(f"cannot interpret {type(value).__name__} as a datetime")
