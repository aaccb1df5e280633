"""
Declarative base and shared column types.
"""

from sqlalchemy import DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

from ticketing.core import datetime_codec

Base = declarative_base()


class StoreDateTime(TypeDecorator):
    """
    Naive-UTC DATETIME column.

    Some drivers hand back DATETIME values as raw packed bytes or strings
    instead of datetime objects; results go through the datetime codec so
    callers always see a datetime.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return datetime_codec.coerce(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return datetime_codec.coerce(value)
