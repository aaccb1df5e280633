"""
Ticket model. Rows are only ever inserted by a capacity ledger inside its
admission transaction, and are never updated or deleted.
"""

from sqlalchemy import Column, Integer, ForeignKey, Index

from ticketing.db.base import Base, StoreDateTime


class Ticket(Base):
    __tablename__ = "ticket"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False)
    event_id = Column(Integer, ForeignKey("event.id"), nullable=False)
    booking_date = Column(StoreDateTime(), nullable=False)

    __table_args__ = (
        # Counted on every admission
        Index("ix_ticket_event_id", "event_id"),
        Index("ix_ticket_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, user={self.user_id}, event={self.event_id})>"
