"""
Scoring Configuration for Pause Tracker.

Thresholds shared by the score engine, risk forecaster and insight
generator. Changing any of these changes user-visible numbers, so they
live in one place rather than inline in the services.
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Pause Score
# -----------------------------------------------------------------------------

HIGH_INTENSITY_THRESHOLD = 7          # intensity_rating >= 7 counts as high
HIGH_INTENSITY_WEIGHT = 1.5
BASE_WEIGHT = 1.0

CONSISTENCY_MIN_DAYS = 5              # distinct local calendar days
CONSISTENCY_MULTIPLIER = 1.1

RECOVERY_RATE_PER_DAY = 0.02
RECOVERY_CAP = 1.0

TREND_DELTA = 2                       # strict: |delta| must exceed this

DEFAULT_DAYS_SINCE_SLIP = 30          # used when no slip has ever been logged

# Label bands, highest first
SCORE_LABELS: list[tuple[int, str]] = [
    (80, "Excellent"),
    (60, "Strong"),
    (40, "Building"),
    (20, "Early Days"),
]
SCORE_LABEL_FLOOR = "Starting Out"

# -----------------------------------------------------------------------------
# Risk forecast
# -----------------------------------------------------------------------------

RISK_WINDOW_HOURS = 24
RISK_HIGH_INTENSITY_COUNT = 2
RISK_HIGH_TOTAL_COUNT = 4
RISK_MODERATE_TOTAL_COUNT = 2
RISK_MODERATE_INTENSITY_COUNT = 1

# -----------------------------------------------------------------------------
# Insights
# -----------------------------------------------------------------------------

EVENING_START_HOUR = 20               # band wraps past midnight
EVENING_END_HOUR = 2
EVENING_MIN_URGES = 2
EVENING_MIN_RATIO = 0.4               # strict

TRIGGER_MIN_COUNT = 3

# -----------------------------------------------------------------------------
# Weekly summary
# -----------------------------------------------------------------------------

WEEKLY_CHALLENGE_TARGET = 7           # aim for one challenge a day
SLIP_TRIGGER_WEIGHT = 0.5             # slips count half in the trigger map
URGE_TRIGGER_WEIGHT = 1.0
REFLECTION_CHARS_PER_POINT = 3
REFLECTION_POINTS_PER_TRIGGER = 10
REFLECTION_MAX = 100.0
