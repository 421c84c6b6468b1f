"""
Risk Forecaster for Pause Tracker.

Classifies how risky the user's current state is from the urge events of
the trailing 24 hours. The window is relative to "now", so the same event
list can classify differently later in the day. The forecast is meant to
be live.

Rules (first match wins):
- HIGH:     2+ high-intensity (>= 7) urges, or 4+ urges in total
- MODERATE: 2+ urges, or 1 high-intensity urge
- LOW:      anything else
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from src.config.scoring import (
    HIGH_INTENSITY_THRESHOLD,
    RISK_HIGH_INTENSITY_COUNT,
    RISK_HIGH_TOTAL_COUNT,
    RISK_MODERATE_INTENSITY_COUNT,
    RISK_MODERATE_TOTAL_COUNT,
    RISK_WINDOW_HOURS,
)
from src.lib.clock import resolve_now, to_epoch_ms
from src.models.records import RiskAssessment, RiskLevel, UrgeEvent

logger = logging.getLogger(__name__)

RISK_WINDOW_MS = int(timedelta(hours=RISK_WINDOW_HOURS).total_seconds() * 1000)

RISK_ASSESSMENTS: dict[RiskLevel, RiskAssessment] = {
    RiskLevel.HIGH: RiskAssessment(
        level=RiskLevel.HIGH,
        label="Elevated today",
        description=(
            "Multiple high-intensity urges recently. "
            "Consider activating a coping strategy preemptively."
        ),
    ),
    RiskLevel.MODERATE: RiskAssessment(
        level=RiskLevel.MODERATE,
        label="Watch and wait",
        description="Some urge activity today. Stay close to your coping tools.",
    ),
    RiskLevel.LOW: RiskAssessment(
        level=RiskLevel.LOW,
        label="Calm today",
        description="Low urge activity in the last 24 hours. Good conditions for a challenge.",
    ),
}


def events_in_window(
    urge_events: Sequence[UrgeEvent],
    now: datetime | None = None,
) -> list[UrgeEvent]:
    """Events strictly newer than now - 24h. An event exactly 24h old is out."""
    cutoff = to_epoch_ms(resolve_now(now)) - RISK_WINDOW_MS
    return [e for e in urge_events if e.timestamp > cutoff]


def classify_risk(total: int, high_intensity: int) -> RiskLevel:
    """Map 24h counts to a risk level."""
    if high_intensity >= RISK_HIGH_INTENSITY_COUNT or total >= RISK_HIGH_TOTAL_COUNT:
        return RiskLevel.HIGH
    if total >= RISK_MODERATE_TOTAL_COUNT or high_intensity >= RISK_MODERATE_INTENSITY_COUNT:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def get_risk_level(
    urge_events: Sequence[UrgeEvent],
    now: datetime | None = None,
) -> RiskAssessment:
    """
    Forecast the current risk level.

    Args:
        urge_events: Any urge events; filtered here to the trailing 24 hours
        now: Current instant (defaults to the module clock)

    Returns:
        RiskAssessment with level, label and description
    """
    recent = events_in_window(urge_events, now)
    high_intensity = sum(1 for e in recent if e.intensity_rating >= HIGH_INTENSITY_THRESHOLD)
    level = classify_risk(len(recent), high_intensity)

    logger.debug(
        "Risk %s: %d urges in window, %d high intensity",
        level, len(recent), high_intensity,
    )
    return RISK_ASSESSMENTS[level]


__all__ = [
    "RISK_ASSESSMENTS",
    "RISK_WINDOW_MS",
    "classify_risk",
    "events_in_window",
    "get_risk_level",
]
