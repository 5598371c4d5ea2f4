"""Conference Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - Every incoming timestamp accepts the legacy shapes (ISO string, epoch ms,
      {seconds, nanoseconds}) and is normalized to an aware UTC datetime
    - ConferenceCreate: title 1-300 chars, stripped
    - ConferenceResponse carries both the stored status and the status computed at
      response time, plus a countdown for live conferences with an end time

Design Decisions:
    - BeforeValidator wraps normalize_instant: the same adapter the job uses, so the API
      and the store can never disagree about a timestamp
    - Literal status over str enum in requests: Pydantic handles validation natively
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from conference_status.core.countdown import remaining_time
from conference_status.core.domain_types import ConferenceRecord, ConferenceStatus
from conference_status.core.errors import MalformedRecordError
from conference_status.core.status_resolver import view_status
from conference_status.core.timestamps import normalize_instant


def _normalize(value: Any) -> datetime | None:
    try:
        return normalize_instant(value)
    except MalformedRecordError as e:
        raise ValueError(e.message)


Instant = Annotated[datetime | None, BeforeValidator(_normalize)]


class ConferenceCreate(BaseModel):
    """Conference creation — status defaults to upcoming."""
    title: str = Field(min_length=1, max_length=300)
    description: str = Field("", max_length=20_000)
    organizer_id: str | None = Field(None, max_length=128)
    youtube_url: str | None = Field(None, max_length=500)
    venue: str | None = Field(None, max_length=300)
    is_public: bool = True
    status: Literal["upcoming", "live", "ended"] = "upcoming"
    start_time: Instant = None
    end_time: Instant = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class CountdownResponse(BaseModel):
    hours: int
    minutes: int
    seconds: int
    display: str


class ConferenceResponse(BaseModel):
    """Conference response — stored label plus the instantaneous truth."""
    id: str
    title: str
    description: str = ""
    organizer_id: str | None = None
    youtube_url: str | None = None
    venue: str | None = None
    is_public: bool = True
    status: str
    computed_status: str
    start_time: datetime | None = None
    end_time: datetime | None = None
    updated_at: datetime | None = None
    ends_in: CountdownResponse | None = None

    @classmethod
    def build(
        cls, document: dict, record: ConferenceRecord, now: datetime,
    ) -> "ConferenceResponse":
        computed = view_status(record, now)
        ends_in = None
        if computed == ConferenceStatus.LIVE and record.end_time is not None:
            ends_in = CountdownResponse(
                **remaining_time(record.end_time, now).to_dict(),
            )
        return cls(
            id=record.id,
            title=record.title,
            description=document.get("description") or "",
            organizer_id=record.organizer_id,
            youtube_url=document.get("youtube_url"),
            venue=document.get("venue"),
            is_public=bool(document.get("is_public", True)),
            status=(record.status or ConferenceStatus.UPCOMING).value,
            computed_status=computed.value,
            start_time=record.start_time,
            end_time=record.end_time,
            updated_at=record.updated_at,
            ends_in=ends_in,
        )


class ConferenceCatalogResponse(BaseModel):
    live: list[ConferenceResponse]
    upcoming: list[ConferenceResponse]
    past: list[ConferenceResponse]


class ReconciliationStatusResponse(BaseModel):
    enabled: bool
    running: bool
    in_flight: bool
    interval_seconds: float
    ticks_skipped: int
    last_result: dict | None = None


class ReconciliationRunResponse(BaseModel):
    updated: int
    result: dict | None = None
