"""Clock — the single injectable source of "now".

Invariants:
    - Every clock returns a timezone-aware UTC datetime
    - Core functions receive `now` as an argument; only the shell calls a Clock
"""

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Production clock."""
    return datetime.now(timezone.utc)
