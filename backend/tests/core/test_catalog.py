"""Conference Catalog — bucket classification and ordering.

Tests cover:
    - Buckets follow the resolver at `now`, not the stored label, but never fall
      behind an organizer override
    - Each record appears once
    - Sort orders per bucket and the past limit
    - Manually managed records (no window) bucketed by their stored status
"""

from datetime import timedelta

from conference_status.core.catalog import build_catalog
from conference_status.core.domain_types import ConferenceRecord, ConferenceStatus

from tests.fakes import T0


def _record(cid, status="upcoming", start=None, end=None):
    return ConferenceRecord(
        id=cid, status=ConferenceStatus.parse(status),
        start_time=start, end_time=end,
    )


def _ids(bucket):
    return [r.id for r in bucket]


def test_stale_stored_label_is_corrected_in_listing():
    stale = _record(
        "stale", "upcoming",
        T0 - timedelta(minutes=5), T0 + timedelta(minutes=55),
    )
    catalog = build_catalog([stale], T0)
    assert _ids(catalog.live) == ["stale"]
    assert catalog.upcoming == []


def test_records_are_never_duplicated_across_buckets():
    record = _record("c1", "live", T0 - timedelta(hours=1), T0 + timedelta(hours=1))
    catalog = build_catalog([record, record], T0)
    assert _ids(catalog.live) == ["c1"]
    assert catalog.upcoming == [] and catalog.past == []


def test_upcoming_sorted_by_start_ascending_with_unscheduled_last():
    later = _record("later", start=T0 + timedelta(days=2), end=T0 + timedelta(days=2, hours=1))
    sooner = _record("sooner", start=T0 + timedelta(hours=1), end=T0 + timedelta(hours=2))
    unscheduled = _record("manual", "upcoming")
    catalog = build_catalog([unscheduled, later, sooner], T0)
    assert _ids(catalog.upcoming) == ["sooner", "later", "manual"]


def test_live_sorted_by_end_ascending():
    a = _record("a", "live", T0 - timedelta(hours=1), T0 + timedelta(hours=3))
    b = _record("b", "live", T0 - timedelta(hours=1), T0 + timedelta(minutes=10))
    assert _ids(build_catalog([a, b], T0).live) == ["b", "a"]


def test_past_sorted_most_recent_first_and_truncated():
    past = [
        _record(f"p{i}", "ended", T0 - timedelta(days=i, hours=1), T0 - timedelta(days=i))
        for i in range(1, 6)
    ]
    catalog = build_catalog(past, T0, past_limit=3)
    assert _ids(catalog.past) == ["p1", "p2", "p3"]


def test_zero_past_limit_empties_past_bucket():
    record = _record("old", "ended", T0 - timedelta(days=2), T0 - timedelta(days=1))
    assert build_catalog([record], T0, past_limit=0).past == []


def test_manual_records_use_stored_status():
    live = _record("manual-live", "live")
    ended = _record("manual-ended", "ended")
    catalog = build_catalog([live, ended], T0)
    assert _ids(catalog.live) == ["manual-live"]
    assert _ids(catalog.past) == ["manual-ended"]


def test_ended_early_conference_is_past_not_live():
    record = _record("c1", "ended", T0 - timedelta(minutes=30), T0)
    catalog = build_catalog([record], T0)
    assert catalog.live == []
    assert _ids(catalog.past) == ["c1"]


def test_started_early_conference_is_live_not_upcoming():
    record = _record("c1", "live", T0 + timedelta(minutes=10), T0 + timedelta(hours=1))
    catalog = build_catalog([record], T0)
    assert catalog.upcoming == []
    assert _ids(catalog.live) == ["c1"]
