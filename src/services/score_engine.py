"""
Pause Score Engine for Pause Tracker.

The Pause Score rewards longer delays between urge and action:

- Base:               Weighted mean seconds delayed across the urge events
                      passed in (callers pass a 7-day window)
- Intensity weight:   Delays on urges rated 7-10 count 1.5x
- Consistency bonus:  Events on 5+ distinct local calendar days -> score x 1.1
- Recovery modifier:  days_since_last_slip x 0.02 added, capped at +1

The score is displayed "out of 100" but the formula has no ceiling. Long
enough delays push it past 100 and that is left as is.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from datetime import date, datetime, tzinfo

from src.config.scoring import (
    BASE_WEIGHT,
    CONSISTENCY_MIN_DAYS,
    CONSISTENCY_MULTIPLIER,
    DEFAULT_DAYS_SINCE_SLIP,
    HIGH_INTENSITY_THRESHOLD,
    HIGH_INTENSITY_WEIGHT,
    RECOVERY_CAP,
    RECOVERY_RATE_PER_DAY,
    SCORE_LABEL_FLOOR,
    SCORE_LABELS,
    TREND_DELTA,
)
from src.lib.clock import DAY_MS, from_epoch_ms, resolve_now, to_epoch_ms
from src.models.records import ScoreTrend, UrgeEvent

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def intensity_weight(event: UrgeEvent) -> float:
    """1.5 for high-intensity urges, 1.0 otherwise."""
    if event.intensity_rating >= HIGH_INTENSITY_THRESHOLD:
        return HIGH_INTENSITY_WEIGHT
    return BASE_WEIGHT


def active_days(events: Sequence[UrgeEvent], tz: tzinfo | None = None) -> set[date]:
    """Distinct calendar days (in ``tz``, local time by default) with an event."""
    return {from_epoch_ms(e.timestamp, tz).date() for e in events}


def recovery_bonus(days_since_last_slip: int) -> float:
    """Slip-free bonus, never more than RECOVERY_CAP."""
    return min(days_since_last_slip * RECOVERY_RATE_PER_DAY, RECOVERY_CAP)


def calculate_pause_score(
    events: Sequence[UrgeEvent],
    days_since_last_slip: int,
    tz: tzinfo | None = None,
) -> int:
    """
    Calculate the Pause Score.

    The function imposes no time window; callers pass the events they
    want scored (normally the last 7 days).

    Args:
        events: Urge events to score
        days_since_last_slip: Whole days since the most recent slip (>= 0)
        tz: Timezone for counting calendar days. None = system local time.

    Returns:
        Non-negative integer score. 0 for no events, with no recovery
        bonus applied.
    """
    if not events:
        return 0

    weighted_sum = 0.0
    weight_count = 0.0
    for e in events:
        weight = intensity_weight(e)
        weighted_sum += e.duration_seconds * weight
        weight_count += weight

    score = weighted_sum / weight_count if weight_count > 0 else 0.0

    days = active_days(events, tz)
    if len(days) >= CONSISTENCY_MIN_DAYS:
        score *= CONSISTENCY_MULTIPLIER

    score += recovery_bonus(days_since_last_slip)

    result = round_half_up(score)
    logger.debug(
        "Pause score %d from %d events over %d active days",
        result, len(events), len(days),
    )
    return result


def get_score_trend(current_score: float, previous_score: float) -> ScoreTrend:
    """
    Classify the change between two scores.

    A move of exactly +/-2 is flat; the comparison is strict.
    """
    delta = current_score - previous_score
    if delta > TREND_DELTA:
        return ScoreTrend.UP
    if delta < -TREND_DELTA:
        return ScoreTrend.DOWN
    return ScoreTrend.FLAT


def get_score_label(score: int) -> str:
    """Short label for the weekly review ("Excellent" ... "Starting Out")."""
    for floor, label in SCORE_LABELS:
        if score >= floor:
            return label
    return SCORE_LABEL_FLOOR


def format_score(score: int) -> str:
    return f"{score}s"


def format_seconds(seconds: int) -> str:
    """
    Human-readable duration.

    Example:
        >>> format_seconds(45)
        '45s'
        >>> format_seconds(120)
        '2m'
        >>> format_seconds(125)
        '2m 5s'
    """
    if seconds < 60:
        return f"{seconds}s"
    minutes, rem = divmod(seconds, 60)
    return f"{minutes}m {rem}s" if rem > 0 else f"{minutes}m"


def days_since_last_slip(
    last_slip_timestamp: int | None,
    now: datetime | None = None,
    default: int = DEFAULT_DAYS_SINCE_SLIP,
) -> int:
    """
    Whole days elapsed since the last slip.

    Args:
        last_slip_timestamp: Epoch ms of the most recent slip, or None
        now: Current instant (defaults to the module clock)
        default: Returned when no slip has been logged

    Returns:
        Floored day count, never negative
    """
    if last_slip_timestamp is None:
        return default
    elapsed = to_epoch_ms(resolve_now(now)) - last_slip_timestamp
    return max(elapsed // DAY_MS, 0)


__all__ = [
    "active_days",
    "calculate_pause_score",
    "days_since_last_slip",
    "format_score",
    "format_seconds",
    "get_score_label",
    "get_score_trend",
    "intensity_weight",
    "recovery_bonus",
    "round_half_up",
]
