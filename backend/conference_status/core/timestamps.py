"""Timestamp Normalization — every stored timestamp shape becomes one canonical instant.

Invariants:
    - Output is an aware UTC datetime or None — nothing past this module branches on shape
    - Naive datetimes are interpreted as UTC (SQLite drops tzinfo on read)
    - Numeric epochs are milliseconds
    - Unrecognized shapes raise MalformedTimestampError, never a bare ValueError/TypeError

Design Decisions:
    - Accepts store-SDK timestamp objects by duck typing (to_datetime/ToDatetime) so the
      core never imports a store client library
    - Firestore JSON exports use `_seconds`/`_nanoseconds`; both spellings accepted
"""

from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone

from conference_status.core.errors import MalformedTimestampError

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def normalize_instant(raw: object, field_name: str | None = None) -> datetime | None:
    """Convert any supported timestamp shape to an aware UTC datetime."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise MalformedTimestampError(raw, field_name)
    if isinstance(raw, datetime):
        return _as_utc(raw)
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc)
    if isinstance(raw, (int, float)):
        return _from_epoch_ms_checked(raw, field_name)
    if isinstance(raw, str):
        return _parse_string(raw, field_name)
    if isinstance(raw, Mapping):
        return _parse_seconds_mapping(raw, field_name)
    for attr in ("to_datetime", "ToDatetime"):
        converter = getattr(raw, attr, None)
        if callable(converter):
            value = converter()
            if isinstance(value, datetime):
                return _as_utc(value)
    raise MalformedTimestampError(raw, field_name)


def to_epoch_ms(instant: datetime) -> int:
    """Instant → integer epoch milliseconds."""
    delta = _as_utc(instant) - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def from_epoch_ms(ms: int | float) -> datetime:
    """Epoch milliseconds → instant."""
    return _EPOCH + timedelta(milliseconds=ms)


# ─── Helpers ─────────────────────────────────────────────────────

def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _from_epoch_ms_checked(ms: int | float, field_name: str | None) -> datetime:
    try:
        return from_epoch_ms(ms)
    except (OverflowError, ValueError):
        raise MalformedTimestampError(ms, field_name)


def _parse_string(raw: str, field_name: str | None) -> datetime | None:
    text = raw.strip()
    if not text:
        return None
    try:
        return _from_epoch_ms_checked(float(text), field_name)
    except ValueError:
        pass
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        raise MalformedTimestampError(raw, field_name)


def _parse_seconds_mapping(raw: Mapping, field_name: str | None) -> datetime:
    seconds = raw.get("seconds", raw.get("_seconds"))
    nanos = raw.get("nanoseconds", raw.get("_nanoseconds", 0)) or 0
    if (
        isinstance(seconds, bool) or not isinstance(seconds, (int, float))
        or isinstance(nanos, bool) or not isinstance(nanos, (int, float))
    ):
        raise MalformedTimestampError(raw, field_name)
    try:
        return _EPOCH + timedelta(seconds=seconds, microseconds=nanos / 1000)
    except OverflowError:
        raise MalformedTimestampError(raw, field_name)
