"""
Weekly Summary Service for Pause Tracker.

Aggregates a week of records into the numbers shown on the Awareness and
Weekly Review screens: pause rate, average pause, trigger map, challenge
completion, mood averages, and a per-day activity strip. Also bundles
the score, risk and insights into one WeeklySummary.

All functions are pure; "now" and the calendar timezone are parameters.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo

from src.config.scoring import (
    REFLECTION_CHARS_PER_POINT,
    REFLECTION_MAX,
    REFLECTION_POINTS_PER_TRIGGER,
    SLIP_TRIGGER_WEIGHT,
    URGE_TRIGGER_WEIGHT,
    WEEKLY_CHALLENGE_TARGET,
)
from src.lib.clock import from_epoch_ms, resolve_now, to_epoch_ms
from src.models.records import (
    ChallengeLog,
    Insight,
    MoodLog,
    RiskAssessment,
    ScoreTrend,
    SlipLog,
    TimeOfDay,
    UrgeEvent,
    UrgeOutcome,
)
from src.services.insight_generator import generate_insights
from src.services.risk_forecaster import get_risk_level
from src.services.score_engine import (
    calculate_pause_score,
    get_score_label,
    get_score_trend,
    round_half_up,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class TypeCompletion:
    """Challenge completion for one challenge type."""

    done: int = 0
    total: int = 0


@dataclass
class ChallengeCompletion:
    """Challenge completion against the weekly target."""

    completed: int
    total: int
    pct: int                                     # of max(total, weekly target)
    by_type: dict[str, TypeCompletion] = field(default_factory=dict)


@dataclass
class MoodAverages:
    """Mean mood per check-in slot, one decimal. None when a slot has no logs."""

    morning: float | None
    evening: float | None


@dataclass
class DailyActivity:
    """Urge sessions on one local calendar day."""

    day: date
    count: int
    paused: int


@dataclass
class WeeklySummary:
    """Everything the weekly review screen shows, computed in one pass."""

    score: int
    score_label: str
    trend: ScoreTrend | None
    pause_rate: int | None
    average_pause_seconds: int
    total_urges: int
    total_paused: int
    top_trigger: tuple[str, float] | None
    trigger_counts: dict[str, float]
    challenges: ChallengeCompletion
    mood: MoodAverages
    risk: RiskAssessment
    insights: list[Insight]
    daily_activity: list[DailyActivity]


# =============================================================================
# Calendar helpers
# =============================================================================


def get_week_start(timestamp_ms: int, tz: tzinfo | None = None) -> int:
    """Monday 00:00 (in ``tz``, local by default) of the week holding the timestamp."""
    moment = from_epoch_ms(timestamp_ms, tz)
    monday = moment.date() - timedelta(days=moment.weekday())
    start = datetime(monday.year, monday.month, monday.day, tzinfo=tz)
    return to_epoch_ms(start)


def build_daily_activity(
    urge_events: Sequence[UrgeEvent],
    now: datetime | None = None,
    days: int = 7,
    tz: tzinfo | None = None,
) -> list[DailyActivity]:
    """Per-day urge and pause counts for the last ``days`` days, oldest first."""
    today = from_epoch_ms(to_epoch_ms(resolve_now(now)), tz).date()
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    activity = {d: DailyActivity(day=d, count=0, paused=0) for d in window}

    for e in urge_events:
        bucket = activity.get(from_epoch_ms(e.timestamp, tz).date())
        if bucket is None:
            continue
        bucket.count += 1
        if e.outcome == UrgeOutcome.PAUSED:
            bucket.paused += 1

    return [activity[d] for d in window]


# =============================================================================
# Urge metrics
# =============================================================================


def _paused(urge_events: Sequence[UrgeEvent]) -> list[UrgeEvent]:
    return [e for e in urge_events if e.outcome == UrgeOutcome.PAUSED]


def calculate_pause_rate(urge_events: Sequence[UrgeEvent]) -> int | None:
    """Percentage of urges that ended paused. None with no urges."""
    if not urge_events:
        return None
    return round_half_up(len(_paused(urge_events)) / len(urge_events) * 100)


def average_pause_duration(urge_events: Sequence[UrgeEvent]) -> int:
    """Mean duration of paused urges in seconds, 0 when none paused."""
    paused = _paused(urge_events)
    if not paused:
        return 0
    return round_half_up(sum(e.duration_seconds for e in paused) / len(paused))


def build_trigger_counts(
    urge_events: Sequence[UrgeEvent],
    slip_logs: Sequence[SlipLog],
) -> dict[str, float]:
    """Trigger map: urges count 1, slips count 0.5. First-seen order."""
    counts: dict[str, float] = {}
    for event in urge_events:
        for cat in event.trigger_categories:
            counts[cat] = counts.get(cat, 0.0) + URGE_TRIGGER_WEIGHT
    for slip in slip_logs:
        for cat in slip.trigger_categories:
            counts[cat] = counts.get(cat, 0.0) + SLIP_TRIGGER_WEIGHT
    return counts


def top_trigger(counts: dict[str, float]) -> tuple[str, float] | None:
    """Highest count; first-seen wins ties."""
    if not counts:
        return None
    return max(counts.items(), key=lambda item: item[1])


# =============================================================================
# Challenges, mood, reflection
# =============================================================================


def calculate_challenge_completion(challenge_logs: Sequence[ChallengeLog]) -> ChallengeCompletion:
    """
    Completion against a target of one challenge a day.

    A week with fewer than 7 attempts is still measured out of 7.
    """
    completed = sum(1 for c in challenge_logs if c.completed)
    total = len(challenge_logs)
    pct = round_half_up(completed / max(total, WEEKLY_CHALLENGE_TARGET) * 100)

    by_type: dict[str, TypeCompletion] = {}
    for log in challenge_logs:
        entry = by_type.setdefault(str(log.challenge_type), TypeCompletion())
        entry.total += 1
        if log.completed:
            entry.done += 1

    return ChallengeCompletion(completed=completed, total=total, pct=pct, by_type=by_type)


def challenge_completion_rate(challenge_logs: Sequence[ChallengeLog]) -> int:
    """Plain completion percentage over whatever logs are passed in."""
    if not challenge_logs:
        return 0
    completed = sum(1 for c in challenge_logs if c.completed)
    return round_half_up(completed / len(challenge_logs) * 100)


def _mean_one_decimal(scores: list[int]) -> float | None:
    if not scores:
        return None
    return round_half_up(sum(scores) / len(scores) * 10) / 10


def mood_averages(mood_logs: Sequence[MoodLog]) -> MoodAverages:
    return MoodAverages(
        morning=_mean_one_decimal([m.mood_score for m in mood_logs if m.time_of_day == TimeOfDay.MORNING]),
        evening=_mean_one_decimal([m.mood_score for m in mood_logs if m.time_of_day == TimeOfDay.EVENING]),
    )


def calculate_reflection_depth(
    emotion_notes: str | None,
    intention: str | None,
    trigger_count: int,
) -> float:
    """
    Reflection depth for a slip log, 0-100.

    One point per 3 characters of notes and of intention, plus 10 per
    trigger selected.
    """
    notes_len = len(emotion_notes or "")
    intention_len = len(intention or "")
    raw = (
        notes_len / REFLECTION_CHARS_PER_POINT
        + intention_len / REFLECTION_CHARS_PER_POINT
        + trigger_count * REFLECTION_POINTS_PER_TRIGGER
    )
    return min(raw, REFLECTION_MAX)


# =============================================================================
# Summary
# =============================================================================


def summarize_week(
    urge_events: Sequence[UrgeEvent],
    slip_logs: Sequence[SlipLog],
    challenge_logs: Sequence[ChallengeLog],
    mood_logs: Sequence[MoodLog],
    days_since_last_slip: int,
    previous_score: int | None = None,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> WeeklySummary:
    """
    Build the weekly summary from already-windowed record sets.

    Args:
        urge_events: Urge events for the week
        slip_logs: Slip logs for the week
        challenge_logs: Challenge logs for the week
        mood_logs: Mood logs for the week
        days_since_last_slip: Whole days since the last slip
        previous_score: Last week's score, for the trend (optional)
        now: Current instant (defaults to the module clock)
        tz: Calendar timezone. None = system local time.

    Returns:
        WeeklySummary
    """
    now = resolve_now(now)
    score = calculate_pause_score(urge_events, days_since_last_slip, tz=tz)
    trend = get_score_trend(score, previous_score) if previous_score is not None else None
    counts = build_trigger_counts(urge_events, slip_logs)

    summary = WeeklySummary(
        score=score,
        score_label=get_score_label(score),
        trend=trend,
        pause_rate=calculate_pause_rate(urge_events),
        average_pause_seconds=average_pause_duration(urge_events),
        total_urges=len(urge_events),
        total_paused=len(_paused(urge_events)),
        top_trigger=top_trigger(counts),
        trigger_counts=counts,
        challenges=calculate_challenge_completion(challenge_logs),
        mood=mood_averages(mood_logs),
        risk=get_risk_level(urge_events, now=now),
        insights=generate_insights(urge_events, slip_logs, tz=tz),
        daily_activity=build_daily_activity(urge_events, now=now, tz=tz),
    )
    logger.debug(
        "Weekly summary: score=%d trend=%s urges=%d risk=%s",
        summary.score, summary.trend, summary.total_urges, summary.risk.level,
    )
    return summary


__all__ = [
    "ChallengeCompletion",
    "DailyActivity",
    "MoodAverages",
    "TypeCompletion",
    "WeeklySummary",
    "average_pause_duration",
    "build_daily_activity",
    "build_trigger_counts",
    "calculate_challenge_completion",
    "calculate_pause_rate",
    "calculate_reflection_depth",
    "challenge_completion_rate",
    "get_week_start",
    "mood_averages",
    "summarize_week",
    "top_trigger",
]
