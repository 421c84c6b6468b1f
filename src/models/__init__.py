"""
Models package for Pause Tracker.

This package exports the event records and their enums.

Usage:
    from src.models import UrgeEvent, SlipLog, MoodLog, ChallengeLog
    from src.models import RiskLevel, ScoreTrend, TrackerState
"""

from src.models.records import (
    ChallengeDifficulty,
    ChallengeLog,
    ChallengeType,
    EvidenceLog,
    FollowThrough,
    Insight,
    MoodLog,
    RiskAssessment,
    RiskLevel,
    ScoreTrend,
    SlipLog,
    TimeOfDay,
    TrackerState,
    UrgeEvent,
    UrgeOutcome,
    WeeklyReview,
)

__all__ = [
    # Records
    "UrgeEvent",
    "SlipLog",
    "MoodLog",
    "ChallengeLog",
    "EvidenceLog",
    "WeeklyReview",
    "TrackerState",
    # Derived
    "Insight",
    "RiskAssessment",
    # Enums
    "UrgeOutcome",
    "TimeOfDay",
    "RiskLevel",
    "ScoreTrend",
    "ChallengeDifficulty",
    "ChallengeType",
    "FollowThrough",
]
