"""Organizer Actions — manual start/end overrides and schedule checks."""

from datetime import timedelta

import pytest

from conference_status.core.domain_types import ConferenceStatus
from conference_status.core.errors import (
    ConferenceScheduleError, InvalidTransitionError, ResourceNotFoundError,
)
from conference_status.core.status_resolver import view_status
from conference_status.services.conference_actions import (
    check_schedule, end_conference, start_conference,
)
from conference_status.services.reconciliation_job import ReconciliationJob

from tests.fakes import conference


async def test_start_moves_upcoming_to_live(clock, repo):
    now = clock()
    repo.documents["c1"] = conference(
        "c1", "upcoming", now + timedelta(minutes=15), now + timedelta(hours=1),
    )
    record = await start_conference(repo, "c1", now)
    assert record.status == ConferenceStatus.LIVE
    assert repo.status_of("c1") == "live"


async def test_early_start_pulls_start_time_in(clock, repo):
    now = clock()
    end = now + timedelta(hours=1)
    repo.documents["c1"] = conference("c1", "upcoming", now + timedelta(minutes=15), end)
    record = await start_conference(repo, "c1", now)
    assert record.start_time == now
    assert record.end_time == end
    assert repo.documents["c1"]["start_time"] == now
    assert view_status(record, now) == ConferenceStatus.LIVE


async def test_late_start_keeps_scheduled_start_time(clock, repo):
    now = clock()
    scheduled = now - timedelta(minutes=5)
    repo.documents["c1"] = conference("c1", "upcoming", scheduled, now + timedelta(hours=1))
    record = await start_conference(repo, "c1", now)
    assert record.start_time == scheduled
    assert "start_time" not in repo.writes[-1][1]


async def test_start_on_live_is_a_no_op(clock, repo):
    repo.documents["c1"] = conference("c1", "live")
    await start_conference(repo, "c1", clock())
    assert repo.writes == []


async def test_start_on_ended_is_rejected(clock, repo):
    repo.documents["c1"] = conference("c1", "ended")
    with pytest.raises(InvalidTransitionError):
        await start_conference(repo, "c1", clock())


async def test_start_unknown_conference(clock, repo):
    with pytest.raises(ResourceNotFoundError):
        await start_conference(repo, "missing", clock())


async def test_end_sets_status_and_pulls_end_time_in(clock, repo):
    now = clock()
    repo.documents["c1"] = conference(
        "c1", "live", now - timedelta(minutes=30), now + timedelta(minutes=30),
    )
    record = await end_conference(repo, "c1", now)
    assert record.status == ConferenceStatus.ENDED
    assert record.end_time == now
    assert view_status(record, now) == ConferenceStatus.ENDED
    assert repo.documents["c1"]["end_time"] == now
    assert repo.status_of("c1") == "ended"


async def test_end_keeps_an_earlier_end_time(clock, repo):
    now = clock()
    earlier = now - timedelta(minutes=5)
    repo.documents["c1"] = conference("c1", "live", now - timedelta(hours=1), earlier)
    record = await end_conference(repo, "c1", now)
    assert record.end_time == earlier


async def test_end_before_scheduled_start_keeps_window_ordered(clock, repo):
    now = clock()
    repo.documents["c1"] = conference(
        "c1", "upcoming", now + timedelta(hours=1), now + timedelta(hours=2),
    )
    record = await end_conference(repo, "c1", now)
    assert record.start_time == record.end_time == now


async def test_end_on_ended_is_a_no_op(clock, repo):
    repo.documents["c1"] = conference("c1", "ended")
    await end_conference(repo, "c1", clock())
    assert repo.writes == []


async def test_job_respects_manual_end(clock, repo):
    now = clock()
    repo.documents["c1"] = conference(
        "c1", "live", now - timedelta(minutes=30), now + timedelta(minutes=30),
    )
    await end_conference(repo, "c1", now)
    writes = len(repo.writes)

    assert await ReconciliationJob(repo, clock=clock).run_once() == 0
    assert len(repo.writes) == writes
    assert repo.status_of("c1") == "ended"


def test_check_schedule_rejects_inverted_window(clock):
    now = clock()
    with pytest.raises(ConferenceScheduleError):
        check_schedule(now, now - timedelta(seconds=1))


def test_check_schedule_allows_open_and_equal_windows(clock):
    now = clock()
    check_schedule(now, now)
    check_schedule(None, now)
    check_schedule(now, None)
