"""Record Mapping — raw store documents → ConferenceRecord snapshots.

Invariants:
    - Accepts snake_case and the legacy camelCase keys (startTime, endTime, organizerId, updatedAt)
    - Timestamps go through normalize_instant; a bad shape raises MalformedTimestampError
      naming the field and the conference
    - A document without an id raises MalformedRecordError
    - Status strings are parsed leniently; unknown labels become None (unset)
"""

from collections.abc import Mapping
from typing import Any

from conference_status.core.domain_types import (
    ConferenceId, ConferenceRecord, ConferenceStatus,
)
from conference_status.core.errors import MalformedRecordError
from conference_status.core.timestamps import normalize_instant

_ALIASES = {
    "start_time": "startTime",
    "end_time": "endTime",
    "organizer_id": "organizerId",
    "updated_at": "updatedAt",
}


def record_from_document(document: Mapping[str, Any]) -> ConferenceRecord:
    """Build a record snapshot, normalizing every timestamp field."""
    raw_id = document.get("id")
    if raw_id is None or str(raw_id) == "":
        raise MalformedRecordError("Conference document has no id", "id")
    conference_id = ConferenceId(str(raw_id))

    def timestamp(name: str):
        try:
            return normalize_instant(_field(document, name), name)
        except MalformedRecordError as e:
            e.context.conference_id = conference_id
            raise

    organizer = _field(document, "organizer_id")
    return ConferenceRecord(
        id=conference_id,
        status=ConferenceStatus.parse(document.get("status")),
        start_time=timestamp("start_time"),
        end_time=timestamp("end_time"),
        title=str(document.get("title") or ""),
        organizer_id=str(organizer) if organizer is not None else None,
        updated_at=timestamp("updated_at"),
    )


def _field(document: Mapping[str, Any], name: str) -> Any:
    if name in document:
        return document[name]
    alias = _ALIASES.get(name)
    return document.get(alias) if alias else None
