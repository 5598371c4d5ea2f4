"""Conference ORM — persisted conference records and their lifecycle label.

Invariants:
    - id is an opaque string primary key (document ids imported from the legacy store fit as-is)
    - status is one of upcoming | live | ended; new rows start upcoming
    - start_time/end_time nullable: a row missing either is manually managed
    - updated_at bumps on every write, including reconciliation writes

Design Decisions:
    - String id over UUID column: legacy document ids are not UUIDs
    - status indexed: listing pages filter by it
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from conference_status.db.base import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Conference(Base):
    """Conference — scheduled livestream event with a lifecycle status."""
    __tablename__ = "conferences"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: uuid.uuid4().hex,
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    organizer_id: Mapped[str | None] = mapped_column(
        String(128), nullable=True, index=True,
    )
    youtube_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    venue: Mapped[str | None] = mapped_column(String(300), nullable=True)
    is_public: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="upcoming", index=True,
    )
    start_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now,
    )

    def to_document(self) -> dict:
        """Row → store document (raw; core/records.py normalizes)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "organizer_id": self.organizer_id,
            "youtube_url": self.youtube_url,
            "venue": self.venue,
            "is_public": self.is_public,
            "status": self.status,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
