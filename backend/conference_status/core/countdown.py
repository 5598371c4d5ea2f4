"""Countdown — remaining time until a target instant, as whole h/m/s.

Invariants:
    - Components are non-negative integers; past targets clamp to 00:00:00
    - Sub-second remainders are floored (a countdown never shows more than is left)
    - Hours are not wrapped at 24 — a two-day window reads 48:00:00
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RemainingTime:
    hours: int
    minutes: int
    seconds: int

    @property
    def is_zero(self) -> bool:
        return self.hours == 0 and self.minutes == 0 and self.seconds == 0

    @property
    def total_seconds(self) -> int:
        return self.hours * 3600 + self.minutes * 60 + self.seconds

    def format(self) -> str:
        """Zero-padded HH:MM:SS."""
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"

    def to_dict(self) -> dict:
        return {
            "hours": self.hours,
            "minutes": self.minutes,
            "seconds": self.seconds,
            "display": self.format(),
        }


ZERO = RemainingTime(0, 0, 0)


def remaining_time(target: datetime, now: datetime) -> RemainingTime:
    """Whole hours/minutes/seconds from now until target, clamped at zero."""
    total = int((target - now).total_seconds())
    if total <= 0:
        return ZERO
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return RemainingTime(hours, minutes, seconds)
