"""Status Resolver — the one place a conference's lifecycle state is derived from time.

Invariants:
    - resolve_status is pure: same (stored, start, end, now) → same result, no clock reads
    - Missing start or end → stored status is authoritative (fallback: upcoming)
    - Live window is inclusive at both ends: start <= now <= end
    - now > end → ended regardless of stored status (covers upcoming → ended skips)
    - plan_transition only ever returns forward moves: upcoming < live < ended
    - view_status is never behind the stored status: an organizer override reads
      back immediately, before any reconciliation pass

Design Decisions:
    - Resolver and transition planner split: views want the instantaneous truth,
      the reconciliation job wants only the writes that never regress a record
    - view_status is the forward-max of stored and resolved, so ended is terminal in
      every read path even when end_time == now
    - Manual organizer overrides survive because a forward-only planner cannot undo them
"""

from datetime import datetime

from conference_status.core.domain_types import ConferenceRecord, ConferenceStatus

STATUS_ORDER: dict[ConferenceStatus, int] = {
    ConferenceStatus.UPCOMING: 0,
    ConferenceStatus.LIVE: 1,
    ConferenceStatus.ENDED: 2,
}


def resolve_status(
    stored_status: ConferenceStatus | str | None,
    start_time: datetime | None,
    end_time: datetime | None,
    now: datetime,
) -> ConferenceStatus:
    """Compute the lifecycle state at `now`."""
    stored = ConferenceStatus.parse(stored_status) or ConferenceStatus.UPCOMING
    if start_time is None or end_time is None:
        return stored
    if now < start_time:
        return ConferenceStatus.UPCOMING
    if now <= end_time:
        return ConferenceStatus.LIVE
    return ConferenceStatus.ENDED


def resolve_record(record: ConferenceRecord, now: datetime) -> ConferenceStatus:
    """resolve_status applied to a record snapshot."""
    return resolve_status(record.status, record.start_time, record.end_time, now)


def is_forward_transition(
    current: ConferenceStatus | str | None, target: ConferenceStatus,
) -> bool:
    """True when target is strictly later in the lifecycle than current."""
    current_status = ConferenceStatus.parse(current) or ConferenceStatus.UPCOMING
    return STATUS_ORDER[target] > STATUS_ORDER[current_status]


def plan_transition(
    stored_status: ConferenceStatus | str | None,
    start_time: datetime | None,
    end_time: datetime | None,
    now: datetime,
) -> ConferenceStatus | None:
    """Status to persist, or None when the stored value must stay.

    Returns the resolver's value only when it differs from what is stored and
    moves the record forward. An unset or unrecognized stored status is treated
    as upcoming, so a scheduled record with no status is written even when the
    resolver says upcoming.
    """
    if start_time is None or end_time is None:
        return None
    target = resolve_status(stored_status, start_time, end_time, now)
    stored = ConferenceStatus.parse(stored_status)
    if stored is None:
        return target
    if target == stored or not is_forward_transition(stored, target):
        return None
    return target


def view_status(record: ConferenceRecord, now: datetime) -> ConferenceStatus:
    """Status shown to readers: the resolver's value, never behind what is stored."""
    computed = resolve_record(record, now)
    stored = record.status or ConferenceStatus.UPCOMING
    if STATUS_ORDER[stored] > STATUS_ORDER[computed]:
        return stored
    return computed
