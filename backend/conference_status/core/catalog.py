"""Conference Catalog — live/upcoming/past buckets for listing pages.

Invariants:
    - Buckets come from view_status at `now`: time-accurate between reconciliation
      ticks, and never behind an organizer override (ended early stays past)
    - Each record lands in exactly one bucket (no live/upcoming duplicates)
    - upcoming: start ascending; live: end ascending; past: end descending, truncated
    - Records without a sort key go last in their bucket
"""

from dataclasses import dataclass, field
from datetime import datetime

from conference_status.core.domain_types import ConferenceRecord, ConferenceStatus
from conference_status.core.status_resolver import view_status

DEFAULT_PAST_LIMIT = 10


@dataclass
class ConferenceCatalog:
    live: list[ConferenceRecord] = field(default_factory=list)
    upcoming: list[ConferenceRecord] = field(default_factory=list)
    past: list[ConferenceRecord] = field(default_factory=list)


def build_catalog(
    records: list[ConferenceRecord],
    now: datetime,
    past_limit: int = DEFAULT_PAST_LIMIT,
) -> ConferenceCatalog:
    """Classify records by their status at `now`."""
    catalog = ConferenceCatalog()
    buckets = {
        ConferenceStatus.LIVE: catalog.live,
        ConferenceStatus.UPCOMING: catalog.upcoming,
        ConferenceStatus.ENDED: catalog.past,
    }
    seen: set[str] = set()
    for record in records:
        if record.id in seen:
            continue
        seen.add(record.id)
        buckets[view_status(record, now)].append(record)

    catalog.upcoming.sort(key=lambda r: _ascending(r.start_time))
    catalog.live.sort(key=lambda r: _ascending(r.end_time))
    catalog.past.sort(key=lambda r: _descending(r.end_time))
    del catalog.past[max(past_limit, 0):]
    return catalog


def _ascending(value: datetime | None) -> tuple[bool, float]:
    return (value is None, value.timestamp() if value else 0.0)


def _descending(value: datetime | None) -> tuple[bool, float]:
    return (value is None, -value.timestamp() if value else 0.0)
