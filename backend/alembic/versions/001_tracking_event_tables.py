"""Add tracking event tables: click_events, open_events, conversion_events

Revision ID: 001_tracking_events
Revises:
Create Date: 2026-10-18

Note: These tables are also created by SQLAlchemy's Base.metadata.create_all()
in app startup. This migration exists for proper schema versioning and
production upgrade paths. On a fresh deploy, create_all handles everything.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_tracking_events"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

EVENT_TABLES = ("click_events", "open_events", "conversion_events")


def upgrade() -> None:
    # ----------------------------------------------------------------
    # One table per event type, identical columns
    # ----------------------------------------------------------------
    for table in EVENT_TABLES:
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("lead_id", sa.String(255), nullable=False, server_default=""),
            sa.Column("campaign", sa.String(255), nullable=False, server_default=""),
            sa.Column("industry", sa.String(255), nullable=False, server_default=""),
            sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column("user_agent", sa.Text(), nullable=False, server_default=""),
            sa.Column("ip_hash", sa.String(64), nullable=False, server_default=""),
        )
        op.create_index(f"ix_{table}_lead_id", table, ["lead_id"])
        op.create_index(f"ix_{table}_campaign", table, ["campaign"])


def downgrade() -> None:
    for table in reversed(EVENT_TABLES):
        op.drop_index(f"ix_{table}_campaign", table)
        op.drop_index(f"ix_{table}_lead_id", table)
        op.drop_table(table)
