"""
Clock abstraction for Pause Tracker.

The risk forecast and the weekly reflection prompt depend on "now".
Services take an explicit ``now`` argument and fall back to a module
level Clock when it is omitted, so tests can pin time without patching
``datetime``.

Timestamps on records are integer milliseconds since the Unix epoch.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, tzinfo
from typing import Protocol, runtime_checkable

MS_PER_SECOND = 1000
DAY_MS = 24 * 60 * 60 * MS_PER_SECOND
WEEK_MS = 7 * DAY_MS

# 9999-12-30T23:59:59.999Z: one day short of datetime.max so the local
# conversion stays in range under any UTC offset
MAX_EPOCH_MS = 253_402_300_799_999 - DAY_MS


@runtime_checkable
class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock. Always returns an aware UTC datetime."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """
    Clock pinned to a single instant.

    Naive datetimes are taken as local time, matching how
    ``datetime.timestamp()`` treats them.
    """

    def __init__(self, instant: datetime):
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, delta: timedelta) -> None:
        """Move the pinned instant forward by ``delta``."""
        self._instant = self._instant + delta

    def set(self, instant: datetime) -> None:
        self._instant = instant


def to_epoch_ms(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds."""
    return int(dt.timestamp() * MS_PER_SECOND)


def from_epoch_ms(timestamp_ms: int, tz: tzinfo | None = None) -> datetime:
    """
    Convert epoch milliseconds to a datetime in ``tz``.

    With ``tz=None`` the result is a naive datetime in the system's
    local time, which is what calendar-day and hour-of-day rules use.
    """
    return datetime.fromtimestamp(timestamp_ms / MS_PER_SECOND, tz=tz)


_default_clock: Clock = SystemClock()


def get_clock() -> Clock:
    """Get the process-wide default clock."""
    return _default_clock


def set_clock(clock: Clock) -> Clock:
    """
    Replace the process-wide default clock.

    Returns:
        The previously installed clock, so callers can restore it
    """
    global _default_clock
    previous = _default_clock
    _default_clock = clock
    return previous


def resolve_now(now: datetime | None = None) -> datetime:
    """Return ``now`` if given, else the default clock's current instant."""
    return now if now is not None else _default_clock.now()


__all__ = [
    "DAY_MS",
    "MAX_EPOCH_MS",
    "WEEK_MS",
    "Clock",
    "FixedClock",
    "SystemClock",
    "from_epoch_ms",
    "get_clock",
    "resolve_now",
    "set_clock",
    "to_epoch_ms",
]
