"""Organizer Actions — manual lifecycle overrides applied on top of the time-driven job.

Invariants:
    - start_conference: upcoming → live and start_time pulled in to `now`; live is a no-op;
      ended is rejected (ended is terminal)
    - end_conference: upcoming/live → ended and end_time pulled in to `now`; ended is a no-op
    - Both write through the ConferenceRepository and return the resulting record snapshot
    - check_schedule: end_time may not precede start_time

Design Decisions:
    - Overrides only ever move a record forward, so the reconciliation job (forward-only)
      never has to undo or fight them
    - Neither action pushes a boundary later than what is stored: start_time becomes
      min(stored, now), end_time becomes min(stored, now)
"""

import logging
from dataclasses import replace
from datetime import datetime

from conference_status.core.domain_types import (
    ConferenceId, ConferenceRecord, ConferenceStatus,
)
from conference_status.core.errors import (
    ConferenceScheduleError, InvalidTransitionError, ResourceNotFoundError,
)
from conference_status.core.records import record_from_document
from conference_status.core.repository_protocols import ConferenceRepository

logger = logging.getLogger(__name__)


def check_schedule(start_time: datetime | None, end_time: datetime | None) -> None:
    if start_time is not None and end_time is not None and end_time < start_time:
        raise ConferenceScheduleError("end_time must not be before start_time")


async def load_record(
    repository: ConferenceRepository, conference_id: ConferenceId,
) -> ConferenceRecord:
    document = await repository.get_document(conference_id)
    if document is None:
        raise ResourceNotFoundError("Conference", conference_id)
    return record_from_document(document)


async def start_conference(
    repository: ConferenceRepository, conference_id: ConferenceId, now: datetime,
) -> ConferenceRecord:
    """Organizer starts a conference early (or on time)."""
    record = await load_record(repository, conference_id)
    current = record.status or ConferenceStatus.UPCOMING
    if current == ConferenceStatus.ENDED:
        raise InvalidTransitionError(current.value, ConferenceStatus.LIVE.value)
    if current == ConferenceStatus.LIVE:
        return record

    start_time = record.start_time
    fields: dict = {"status": ConferenceStatus.LIVE, "updated_at": now}
    if start_time is not None and start_time > now:
        start_time = now
        fields["start_time"] = start_time

    await repository.update_fields(conference_id, **fields)
    logger.info(
        "Conference started by organizer",
        extra={
            "conference_id": conference_id,
            "from_status": current.value, "to_status": "live",
        },
    )
    return replace(
        record, status=ConferenceStatus.LIVE, start_time=start_time, updated_at=now,
    )


async def end_conference(
    repository: ConferenceRepository, conference_id: ConferenceId, now: datetime,
) -> ConferenceRecord:
    """Organizer ends a conference; its end time becomes now unless already earlier."""
    record = await load_record(repository, conference_id)
    current = record.status or ConferenceStatus.UPCOMING
    if current == ConferenceStatus.ENDED:
        return record

    end_time = now
    if record.end_time is not None and record.end_time < now:
        end_time = record.end_time
    start_time = record.start_time
    fields: dict = {
        "status": ConferenceStatus.ENDED, "end_time": end_time, "updated_at": now,
    }
    if start_time is not None and start_time > end_time:
        # Ended before its scheduled start: keep the window well-formed
        start_time = end_time
        fields["start_time"] = start_time

    await repository.update_fields(conference_id, **fields)
    logger.info(
        "Conference ended by organizer",
        extra={
            "conference_id": conference_id,
            "from_status": current.value, "to_status": "ended",
        },
    )
    return replace(
        record, status=ConferenceStatus.ENDED,
        start_time=start_time, end_time=end_time, updated_at=now,
    )
