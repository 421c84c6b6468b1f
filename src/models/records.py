"""
Event Records for Pause Tracker.

Immutable value records for everything the tracker logs. The scoring,
risk and insight services only read these; they never create or mutate
them.

Records mirror the hosted row store's tables. Rows use snake_case column
names and store the timestamp as ``ts`` (BIGINT epoch ms); ``from_row`` /
``to_row`` do the renaming at the data-access boundary.

Numeric ranges (intensity 1-10, emotion 1-5, ...) are NOT validated here.
The write path validates them (see src.api.schemas).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeVar

from src.lib.exceptions import SerializationError, ValidationError

_E = TypeVar("_E", bound=StrEnum)

# =============================================================================
# Enums
# =============================================================================


class UrgeOutcome(StrEnum):
    """How an urge-timer session ended."""
    PAUSED = "paused"
    CONTINUED = "continued"
    STILL_IN_IT = "still-in-it"
    ABANDONED = "abandoned"


class TimeOfDay(StrEnum):
    """Mood check-in slot."""
    MORNING = "morning"
    EVENING = "evening"


class RiskLevel(StrEnum):
    """Current risk level from the trailing 24 hours of urges."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class ScoreTrend(StrEnum):
    """Direction of the Pause Score between two periods."""
    UP = "up"
    FLAT = "flat"
    DOWN = "down"


class ChallengeDifficulty(StrEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    HARD = "hard"


class ChallengeType(StrEnum):
    PHYSICAL = "physical"
    FOCUS = "focus"
    AWARENESS = "awareness"
    DIGITAL = "digital"


class FollowThrough(StrEnum):
    """Did the user act on last week's intention?"""
    YES = "yes"
    PARTLY = "partly"
    NO = "no"


# =============================================================================
# Row helpers
# =============================================================================


def _require(row: Mapping[str, Any], column: str, record: str) -> Any:
    try:
        return row[column]
    except KeyError as e:
        raise ValidationError(f"{record} row is missing required column {column!r}") from e


def _enum(enum_cls: type[_E], value: Any, column: str, record: str) -> _E:
    try:
        return enum_cls(value)
    except ValueError as e:
        raise SerializationError(f"{record} row has unknown {column} {value!r}") from e


def _tags(value: Iterable[str] | None) -> tuple[str, ...]:
    return tuple(value) if value else ()


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True)
class UrgeEvent:
    """A logged urge-timer session."""

    timestamp: int                               # epoch ms
    duration_seconds: int                        # how long the user delayed
    intensity_rating: int                        # 1-10
    trigger_categories: tuple[str, ...] = ()
    outcome: UrgeOutcome = UrgeOutcome.PAUSED
    level: int = 1                               # disclosure stages engaged (1-3)
    extension_count: int = 0                     # manual timer extensions
    notes: str | None = None
    id: int | None = None
    user_id: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> UrgeEvent:
        return cls(
            id=row.get("id"),
            user_id=row.get("user_id"),
            timestamp=_require(row, "ts", "urge_events"),
            duration_seconds=_require(row, "duration_seconds", "urge_events"),
            intensity_rating=_require(row, "intensity_rating", "urge_events"),
            trigger_categories=_tags(row.get("trigger_categories")),
            outcome=_enum(UrgeOutcome, _require(row, "outcome", "urge_events"), "outcome", "urge_events"),
            level=row.get("level") or 1,
            notes=row.get("notes"),
            extension_count=row.get("extension_count") or 0,
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "ts": self.timestamp,
            "duration_seconds": self.duration_seconds,
            "intensity_rating": self.intensity_rating,
            "trigger_categories": list(self.trigger_categories),
            "outcome": str(self.outcome),
            "level": self.level,
            "notes": self.notes,
            "extension_count": self.extension_count,
        }


@dataclass(frozen=True)
class SlipLog:
    """A logged lapse, with optional reflection."""

    timestamp: int
    trigger_categories: tuple[str, ...] = ()
    emotion_score: int = 0                       # 1-5, 0 when skipped
    emotion_emoji: str = ""                      # display only
    emotion_notes: str | None = None
    intention: str | None = None
    reflection_depth_score: float = 0.0          # 0-100
    is_quick_log: bool = False
    id: int | None = None
    user_id: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> SlipLog:
        return cls(
            id=row.get("id"),
            user_id=row.get("user_id"),
            timestamp=_require(row, "ts", "slip_logs"),
            trigger_categories=_tags(row.get("trigger_categories")),
            emotion_emoji=row.get("emotion_emoji") or "",
            emotion_score=row.get("emotion_score") or 0,
            emotion_notes=row.get("emotion_notes"),
            intention=row.get("intention"),
            reflection_depth_score=row.get("reflection_depth_score") or 0,
            is_quick_log=bool(row.get("is_quick_log", False)),
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "ts": self.timestamp,
            "trigger_categories": list(self.trigger_categories),
            "emotion_emoji": self.emotion_emoji,
            "emotion_score": self.emotion_score,
            "emotion_notes": self.emotion_notes,
            "intention": self.intention,
            "reflection_depth_score": self.reflection_depth_score,
            "is_quick_log": self.is_quick_log,
        }


@dataclass(frozen=True)
class MoodLog:
    """Morning or evening mood check-in."""

    timestamp: int
    time_of_day: TimeOfDay
    mood_score: int                              # 1-5
    id: int | None = None
    user_id: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> MoodLog:
        return cls(
            id=row.get("id"),
            user_id=row.get("user_id"),
            timestamp=_require(row, "ts", "mood_logs"),
            time_of_day=_enum(TimeOfDay, _require(row, "time_of_day", "mood_logs"), "time_of_day", "mood_logs"),
            mood_score=_require(row, "mood_score", "mood_logs"),
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "ts": self.timestamp,
            "time_of_day": str(self.time_of_day),
            "mood_score": self.mood_score,
        }


@dataclass(frozen=True)
class ChallengeLog:
    """A training challenge attempt."""

    challenge_id: str
    timestamp: int
    completed: bool
    difficulty: ChallengeDifficulty
    challenge_type: ChallengeType
    duration_minutes: int = 0
    id: int | None = None
    user_id: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ChallengeLog:
        return cls(
            id=row.get("id"),
            user_id=row.get("user_id"),
            challenge_id=_require(row, "challenge_id", "challenge_logs"),
            timestamp=_require(row, "ts", "challenge_logs"),
            completed=bool(_require(row, "completed", "challenge_logs")),
            difficulty=_enum(
                ChallengeDifficulty, _require(row, "difficulty", "challenge_logs"), "difficulty", "challenge_logs",
            ),
            challenge_type=_enum(
                ChallengeType, _require(row, "challenge_type", "challenge_logs"), "challenge_type", "challenge_logs",
            ),
            duration_minutes=row.get("duration_minutes") or 0,
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "challenge_id": self.challenge_id,
            "ts": self.timestamp,
            "completed": self.completed,
            "difficulty": str(self.difficulty),
            "challenge_type": str(self.challenge_type),
            "duration_minutes": self.duration_minutes,
        }


@dataclass(frozen=True)
class EvidenceLog:
    """Free-text evidence of acting in line with the user's values."""

    timestamp: int
    text: str
    identity_label: str = ""
    values_tags: tuple[str, ...] = ()
    id: int | None = None
    user_id: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> EvidenceLog:
        return cls(
            id=row.get("id"),
            user_id=row.get("user_id"),
            timestamp=_require(row, "ts", "evidence_logs"),
            text=_require(row, "text", "evidence_logs"),
            values_tags=_tags(row.get("values_tags")),
            identity_label=row.get("identity_label") or "",
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "ts": self.timestamp,
            "text": self.text,
            "values_tags": list(self.values_tags),
            "identity_label": self.identity_label,
        }


@dataclass(frozen=True)
class WeeklyReview:
    """Snapshot persisted when the user completes a weekly review."""

    week_start: int                              # epoch ms, Monday 00:00 local
    pause_score: int
    intention_trigger: str
    intention_action: str
    alignment_score: int
    reflection_question: str
    completed_at: int
    reflection_text: str | None = None
    follow_through: FollowThrough | None = None
    id: int | None = None
    user_id: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> WeeklyReview:
        follow = row.get("follow_through")
        return cls(
            id=row.get("id"),
            user_id=row.get("user_id"),
            week_start=_require(row, "week_start", "weekly_reviews"),
            pause_score=_require(row, "pause_score", "weekly_reviews"),
            intention_trigger=row.get("intention_trigger") or "",
            intention_action=row.get("intention_action") or "",
            alignment_score=row.get("alignment_score") or 0,
            reflection_text=row.get("reflection_text"),
            reflection_question=row.get("reflection_question") or "",
            follow_through=_enum(FollowThrough, follow, "follow_through", "weekly_reviews") if follow else None,
            completed_at=_require(row, "completed_at", "weekly_reviews"),
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "week_start": self.week_start,
            "pause_score": self.pause_score,
            "intention_trigger": self.intention_trigger,
            "intention_action": self.intention_action,
            "alignment_score": self.alignment_score,
            "reflection_text": self.reflection_text,
            "reflection_question": self.reflection_question,
            "follow_through": str(self.follow_through) if self.follow_through else None,
            "completed_at": self.completed_at,
        }


# =============================================================================
# Derived results
# =============================================================================


@dataclass(frozen=True)
class Insight:
    """A pattern-based message. ``id`` names the rule that fired."""

    id: str
    text: str
    action_label: str | None = None
    action_route: str | None = None


@dataclass(frozen=True)
class RiskAssessment:
    """Current risk level with its display strings."""

    level: RiskLevel
    label: str
    description: str


@dataclass
class TrackerState:
    """
    Client-side state the UI keeps between sessions.

    Passed explicitly to whatever needs it; the scoring services never
    read it.
    """

    device_id: str | None = None
    onboarding_answers: dict[str, Any] = field(default_factory=dict)
    last_slip_timestamp: int | None = None

    def record_slip(self, timestamp: int) -> None:
        """Remember the most recent slip."""
        if self.last_slip_timestamp is None or timestamp > self.last_slip_timestamp:
            self.last_slip_timestamp = timestamp


__all__ = [
    "ChallengeDifficulty",
    "ChallengeLog",
    "ChallengeType",
    "EvidenceLog",
    "FollowThrough",
    "Insight",
    "MoodLog",
    "RiskAssessment",
    "RiskLevel",
    "ScoreTrend",
    "SlipLog",
    "TimeOfDay",
    "TrackerState",
    "UrgeEvent",
    "UrgeOutcome",
    "WeeklyReview",
]
