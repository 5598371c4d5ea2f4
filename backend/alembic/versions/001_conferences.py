"""Conferences table — lifecycle status with optional start/end window.

Revision ID: 001_conferences
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_conferences"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "conferences",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("organizer_id", sa.String(128), nullable=True),
        sa.Column("youtube_url", sa.String(500), nullable=True),
        sa.Column("venue", sa.String(300), nullable=True),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("status", sa.String(20), nullable=False, server_default="upcoming"),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_conferences_status", "conferences", ["status"])
    op.create_index("ix_conferences_organizer_id", "conferences", ["organizer_id"])


def downgrade() -> None:
    op.drop_index("ix_conferences_organizer_id", table_name="conferences")
    op.drop_index("ix_conferences_status", table_name="conferences")
    op.drop_table("conferences")
