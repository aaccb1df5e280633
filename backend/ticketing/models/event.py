"""
Event model. Capacity (`max_tickets`) is fixed at creation; the number of
issued tickets is always derived from the ticket table, never stored here.
"""

from sqlalchemy import Column, Integer, String, Index, CheckConstraint

from ticketing.db.base import Base, StoreDateTime


class Event(Base):
    __tablename__ = "event"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    date = Column(StoreDateTime(), nullable=False)
    max_tickets = Column(Integer, nullable=False)
    type = Column(String(100), nullable=False)

    __table_args__ = (
        CheckConstraint("max_tickets >= 0", name="check_event_max_tickets_non_negative"),
        CheckConstraint("event_name <> ''", name="check_event_name_not_empty"),
        # /event/current filters on date
        Index("ix_event_date", "date"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.event_name}, max_tickets={self.max_tickets})>"
