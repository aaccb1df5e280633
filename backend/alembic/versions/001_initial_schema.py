"""Initial schema: event, user, ticket with capacity and reference constraints.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "event",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_name", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("max_tickets", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(100), nullable=False),
        sa.CheckConstraint("max_tickets >= 0", name="check_event_max_tickets_non_negative"),
        sa.CheckConstraint("event_name <> ''", name="check_event_name_not_empty"),
    )
    # GET /event/current is a range scan on date
    op.create_index("ix_event_date", "event", ["date"])

    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("rol", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
    )

    op.create_table(
        "ticket",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("event.id"), nullable=False),
        sa.Column("booking_date", sa.DateTime(), nullable=False),
    )
    # Every admission counts tickets for one event while holding its lock;
    # without this index the count is a full scan inside the critical section.
    op.create_index("ix_ticket_event_id", "ticket", ["event_id"])
    op.create_index("ix_ticket_user_id", "ticket", ["user_id"])


def downgrade() -> None:
    op.drop_table("ticket")
    op.drop_table("user")
    op.drop_table("event")
