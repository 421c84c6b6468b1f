"""
Shared test fixtures for Pause Tracker.

This module provides common fixtures used across all test modules:
- Environment setup (dev mode, no timezone override)
- A FixedClock pinned to a known local instant
- Factories for urge events, slip logs, mood logs and challenge logs

Timestamps are built from naive local datetimes, so calendar-day and
hour-of-day assertions hold whatever timezone the test machine runs in.

Usage:
    All fixtures are automatically available to any test in the tests/ directory.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from datetime import datetime

import pytest

# ---------------------------------------------------------------------------
# 1. Environment setup -- must run before any application imports
# ---------------------------------------------------------------------------

os.environ.setdefault("PAUSE_DEV_MODE", "1")
os.environ.pop("PAUSE_TIMEZONE", None)

from src.lib.clock import FixedClock, set_clock, to_epoch_ms  # noqa: E402
from src.models.records import (  # noqa: E402
    ChallengeDifficulty,
    ChallengeLog,
    ChallengeType,
    MoodLog,
    SlipLog,
    TimeOfDay,
    UrgeEvent,
    UrgeOutcome,
)

# Wednesday, mid-afternoon local time
NOW = datetime(2026, 10, 14, 15, 0, 0)


def ms(dt: datetime) -> int:
    """Epoch ms for a naive local datetime."""
    return to_epoch_ms(dt)


# ---------------------------------------------------------------------------
# 2. Clock
# ---------------------------------------------------------------------------

@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def fixed_clock() -> Iterator[FixedClock]:
    """
    Install a FixedClock at NOW as the default clock for the test.

    The previous clock is restored afterwards.
    """
    clock = FixedClock(NOW)
    previous = set_clock(clock)
    yield clock
    set_clock(previous)


# ---------------------------------------------------------------------------
# 3. Record factories
# ---------------------------------------------------------------------------

@pytest.fixture()
def make_urge() -> Callable[..., UrgeEvent]:
    """
    Build an UrgeEvent. ``at`` is a naive local datetime.

    Example::

        def test_something(make_urge):
            e = make_urge(datetime(2026, 10, 14, 21, 0), duration=90, intensity=8)
    """
    def _make(
        at: datetime = NOW,
        duration: int = 60,
        intensity: int = 5,
        triggers: tuple[str, ...] = (),
        outcome: UrgeOutcome = UrgeOutcome.PAUSED,
    ) -> UrgeEvent:
        return UrgeEvent(
            timestamp=ms(at),
            duration_seconds=duration,
            intensity_rating=intensity,
            trigger_categories=triggers,
            outcome=outcome,
        )

    return _make


@pytest.fixture()
def make_slip() -> Callable[..., SlipLog]:
    def _make(at: datetime = NOW, triggers: tuple[str, ...] = ()) -> SlipLog:
        return SlipLog(timestamp=ms(at), trigger_categories=triggers, emotion_score=3)

    return _make


@pytest.fixture()
def make_mood() -> Callable[..., MoodLog]:
    def _make(score: int, slot: TimeOfDay = TimeOfDay.MORNING, at: datetime = NOW) -> MoodLog:
        return MoodLog(timestamp=ms(at), time_of_day=slot, mood_score=score)

    return _make


@pytest.fixture()
def make_challenge() -> Callable[..., ChallengeLog]:
    def _make(
        completed: bool = True,
        challenge_type: ChallengeType = ChallengeType.FOCUS,
        challenge_id: str = "c-1",
        at: datetime = NOW,
    ) -> ChallengeLog:
        return ChallengeLog(
            challenge_id=challenge_id,
            timestamp=ms(at),
            completed=completed,
            difficulty=ChallengeDifficulty.BEGINNER,
            challenge_type=challenge_type,
            duration_minutes=10,
        )

    return _make
