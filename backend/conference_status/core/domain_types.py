"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ConferenceId wraps the store's opaque document id — never a bare str in domain logic
    - Lifecycle states encoded as ConferenceStatus — no raw string matching
    - ConferenceRecord timestamps are canonical instants (aware UTC datetime) or None
    - ConferenceRecord is immutable: a transition produces a write, never a mutation

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enum: serializes to JSON and compares against DB strings without converters
    - frozen dataclass for the record: core functions receive snapshots, not ORM rows
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ConferenceId = NewType("ConferenceId", str)


# ─── Enums ───────────────────────────────────────────────────────

class ConferenceStatus(str, Enum):
    """Conference lifecycle states — maps to DB `status` column."""
    UPCOMING = "upcoming"
    LIVE = "live"
    ENDED = "ended"

    @classmethod
    def parse(cls, value: "str | ConferenceStatus | None") -> "ConferenceStatus | None":
        """Lenient parse: unknown or empty values become None (unset)."""
        if value is None:
            return None
        if isinstance(value, ConferenceStatus):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class ConferenceRecord:
    """Snapshot of one stored conference, as the core sees it."""
    id: ConferenceId
    status: ConferenceStatus | None
    start_time: datetime | None = None
    end_time: datetime | None = None
    title: str = ""
    organizer_id: str | None = None
    updated_at: datetime | None = None

    @property
    def is_scheduled(self) -> bool:
        """Both boundaries present — eligible for time-driven transitions."""
        return self.start_time is not None and self.end_time is not None
