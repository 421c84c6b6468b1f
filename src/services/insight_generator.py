"""
Insight Generator for Pause Tracker.

Scans urge events and slip logs for recurring patterns and turns them into
short, forward-facing messages with an optional suggested action.

Rules, in the order their insights are returned:
1. evening-pattern: urges cluster between 20:00 and 02:00 (local time)
2. trigger-pattern: one slip trigger has come up 3+ times
3. no-data:         no urge events yet, invite a first session

Each rule fires at most once per call. Also holds the self-critical
language screen and the weekly reflection prompts.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from datetime import datetime, tzinfo

from src.config.scoring import (
    EVENING_END_HOUR,
    EVENING_MIN_RATIO,
    EVENING_MIN_URGES,
    EVENING_START_HOUR,
    TRIGGER_MIN_COUNT,
)
from src.lib.clock import WEEK_MS, from_epoch_ms, resolve_now, to_epoch_ms
from src.models.records import Insight, SlipLog, UrgeEvent

logger = logging.getLogger(__name__)

# =============================================================================
# Content
# =============================================================================

EVENING_PATTERN_ID = "evening-pattern"
TRIGGER_PATTERN_ID = "trigger-pattern"
NO_DATA_ID = "no-data"

TRAIN_ROUTE = "/train"
URGE_ROUTE = "/urge"

REFLECTION_QUESTIONS: list[str] = [
    "What did this week teach you about your triggers?",
    "What would someone who believed in you say about your effort this week?",
    "Where did you surprise yourself this week?",
    "What would you do differently, and why does it matter?",
    "What pattern did you notice this week that you hadn't seen before?",
    "What does pausing feel like, compared to the first time you tried it?",
]

SELF_CRITICAL_PHRASES: list[str] = [
    "disgusting",
    "pathetic",
    "worthless",
    "hopeless",
    "useless",
    "weak",
    "failure",
    "loser",
    "hate myself",
    "no willpower",
]


# =============================================================================
# Pattern rules
# =============================================================================


def is_evening_hour(hour: int) -> bool:
    """True for the 20:00-02:00 band, which wraps past midnight."""
    return hour >= EVENING_START_HOUR or hour < EVENING_END_HOUR


def count_evening_urges(urge_events: Sequence[UrgeEvent], tz: tzinfo | None = None) -> int:
    return sum(1 for e in urge_events if is_evening_hour(from_epoch_ms(e.timestamp, tz).hour))


def count_slip_triggers(slip_logs: Sequence[SlipLog]) -> Counter[str]:
    """Frequency of each trigger across slips, in first-seen order."""
    counts: Counter[str] = Counter()
    for slip in slip_logs:
        for trigger in slip.trigger_categories:
            counts[trigger] += 1
    return counts


def dominant_trigger(counts: Counter[str]) -> tuple[str, int] | None:
    """
    Most frequent trigger.

    Ties go to the trigger seen first: max() keeps the earliest maximum
    and Counter preserves insertion order.
    """
    if not counts:
        return None
    return max(counts.items(), key=lambda item: item[1])


def _evening_insight(urge_events: Sequence[UrgeEvent], tz: tzinfo | None) -> Insight | None:
    evening = count_evening_urges(urge_events, tz)
    if evening < EVENING_MIN_URGES or not urge_events:
        return None
    if evening / len(urge_events) <= EVENING_MIN_RATIO:
        return None
    return Insight(
        id=EVENING_PATTERN_ID,
        text=(
            "Your urges tend to cluster in the evening. "
            "Tonight, try the urge timer before opening your phone."
        ),
        action_label="Set an evening challenge",
        action_route=TRAIN_ROUTE,
    )


def _trigger_insight(slip_logs: Sequence[SlipLog]) -> Insight | None:
    top = dominant_trigger(count_slip_triggers(slip_logs))
    if top is None or top[1] < TRIGGER_MIN_COUNT:
        return None
    name, count = top
    return Insight(
        id=TRIGGER_PATTERN_ID,
        text=f'"{name}" has come up {count} times. That combination is worth preparing for.',
        action_label="Set a challenge for it",
        action_route=TRAIN_ROUTE,
    )


def _no_data_insight(urge_events: Sequence[UrgeEvent]) -> Insight | None:
    if urge_events:
        return None
    return Insight(
        id=NO_DATA_ID,
        text="Your first pause starts here. When you feel an urge, open the timer.",
        action_label="Ride the Urge",
        action_route=URGE_ROUTE,
    )


def generate_insights(
    urge_events: Sequence[UrgeEvent],
    slip_logs: Sequence[SlipLog],
    tz: tzinfo | None = None,
) -> list[Insight]:
    """
    Generate pattern insights.

    Args:
        urge_events: Urge events for the window being analysed
        slip_logs: Slip logs for the window being analysed
        tz: Timezone for hour-of-day. None = system local time.

    Returns:
        Zero or more insights, always in rule order
        (evening-pattern, trigger-pattern, no-data)
    """
    candidates = (
        _evening_insight(urge_events, tz),
        _trigger_insight(slip_logs),
        _no_data_insight(urge_events),
    )
    insights = [i for i in candidates if i is not None]
    logger.debug(
        "Generated %d insights from %d urges and %d slips",
        len(insights), len(urge_events), len(slip_logs),
    )
    return insights


# =============================================================================
# Self-critical language
# =============================================================================


def find_self_critical_phrases(text: str) -> list[str]:
    """
    Every listed phrase that occurs in ``text``, in list order.

    Plain substring matching on the lowercased text: no stemming and no
    word boundaries, so "weakness" matches "weak".
    """
    lower = text.lower()
    return [phrase for phrase in SELF_CRITICAL_PHRASES if phrase in lower]


def contains_self_critical_language(text: str) -> bool:
    """True if any self-critical phrase appears anywhere in ``text``."""
    lower = text.lower()
    return any(phrase in lower for phrase in SELF_CRITICAL_PHRASES)


# =============================================================================
# Weekly reflection
# =============================================================================


def get_weekly_reflection_question(week_index: int) -> str:
    """Pick this week's prompt. Same index, same question, on every device."""
    return REFLECTION_QUESTIONS[week_index % len(REFLECTION_QUESTIONS)]


def get_week_index(now: datetime | None = None) -> int:
    """Number of whole weeks since the Unix epoch."""
    return to_epoch_ms(resolve_now(now)) // WEEK_MS


__all__ = [
    "EVENING_PATTERN_ID",
    "NO_DATA_ID",
    "REFLECTION_QUESTIONS",
    "SELF_CRITICAL_PHRASES",
    "TRIGGER_PATTERN_ID",
    "contains_self_critical_language",
    "count_evening_urges",
    "count_slip_triggers",
    "dominant_trigger",
    "find_self_critical_phrases",
    "generate_insights",
    "get_week_index",
    "get_weekly_reflection_question",
    "is_evening_hour",
]
