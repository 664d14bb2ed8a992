# =============================================================================
# lib/countdown.py - Event Countdown Helpers
# =============================================================================
# Pure date arithmetic for the event countdown banner.
#
# The banner text is NOT derived from the target timestamp: the announced
# date/time strings and the technical cutoff are configured independently.
# =============================================================================

from __future__ import annotations

import math
from datetime import datetime, timezone

MS_PER_DAY = 86_400_000


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so naive/aware values can be compared."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def days_remaining(now: datetime, target: datetime) -> int:
    """
    Whole days left until the target, rounded up.

    Never negative: returns 0 once `now` has reached or passed `target`.

    Example:
        days_remaining(datetime(2025, 9, 25, 17, tzinfo=timezone.utc), EVENT)  # 1
    """
    diff_ms = (_as_utc(target) - _as_utc(now)).total_seconds() * 1000
    return max(0, math.ceil(diff_ms / MS_PER_DAY))


def has_started(now: datetime, target: datetime) -> bool:
    """True once the target instant has been reached."""
    return _as_utc(now) >= _as_utc(target)


def format_event_banner(date_display: str, time_display: str) -> str:
    """Join the announced date and time window, e.g. 'September 26, 2025 • 19:00–20:00 CEST'."""
    return f"{date_display} • {time_display}"
