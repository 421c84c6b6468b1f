"""
Pydantic Schemas for the Pause Tracker REST API.

Request models are the write-path validation layer: they enforce the
numeric ranges that the core records assume (intensity 1-10, duration
>= 0, emotion and mood 1-5, ...). Each converts to its core record with
``to_record()``.

All responses use the envelope {"success": bool, "data": ..., "error": ...}.
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.lib.clock import MAX_EPOCH_MS
from src.lib.errors import build_error_response
from src.models.records import (
    ChallengeDifficulty,
    ChallengeLog,
    ChallengeType,
    MoodLog,
    SlipLog,
    TimeOfDay,
    UrgeEvent,
    UrgeOutcome,
)

# =============================================================================
# Envelope
# =============================================================================


def _jsonable(data: Any) -> Any:
    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    if isinstance(data, list):
        return [_jsonable(item) for item in data]
    return data


def success_response(data: Any) -> dict[str, Any]:
    """Wrap ``data`` (dataclasses are converted to dicts) in a success envelope."""
    return {"success": True, "data": _jsonable(data), "error": None}


def error_response(
    code: str,
    message: str | None = None,
    details: dict[str, Any] | None = None,
    lang: str = "en",
) -> dict[str, Any]:
    """Wrap an error code in a failure envelope, message in ``lang``."""
    return {
        "success": False,
        "data": None,
        "error": build_error_response(code, message, details, lang=lang),
    }


# =============================================================================
# Record Schemas
# =============================================================================


class UrgeEventIn(BaseModel):
    """Urge event as submitted by the client."""

    timestamp: int = Field(..., ge=0, le=MAX_EPOCH_MS)
    duration_seconds: int = Field(..., ge=0)
    intensity_rating: int = Field(..., ge=1, le=10)
    trigger_categories: list[str] = Field(default_factory=list)
    outcome: UrgeOutcome = UrgeOutcome.PAUSED
    level: int = Field(default=1, ge=1, le=3)
    extension_count: int = Field(default=0, ge=0)
    notes: str | None = Field(default=None, max_length=2000)

    def to_record(self) -> UrgeEvent:
        return UrgeEvent(
            timestamp=self.timestamp,
            duration_seconds=self.duration_seconds,
            intensity_rating=self.intensity_rating,
            trigger_categories=tuple(self.trigger_categories),
            outcome=self.outcome,
            level=self.level,
            extension_count=self.extension_count,
            notes=self.notes,
        )


class SlipLogIn(BaseModel):
    """Slip log as submitted by the client."""

    timestamp: int = Field(..., ge=0, le=MAX_EPOCH_MS)
    trigger_categories: list[str] = Field(default_factory=list)
    emotion_score: int = Field(default=0, ge=0, le=5)
    emotion_emoji: str = Field(default="", max_length=16)
    emotion_notes: str | None = Field(default=None, max_length=2000)
    intention: str | None = Field(default=None, max_length=2000)
    reflection_depth_score: float = Field(default=0.0, ge=0.0, le=100.0)
    is_quick_log: bool = False

    def to_record(self) -> SlipLog:
        return SlipLog(
            timestamp=self.timestamp,
            trigger_categories=tuple(self.trigger_categories),
            emotion_score=self.emotion_score,
            emotion_emoji=self.emotion_emoji,
            emotion_notes=self.emotion_notes,
            intention=self.intention,
            reflection_depth_score=self.reflection_depth_score,
            is_quick_log=self.is_quick_log,
        )


class MoodLogIn(BaseModel):
    timestamp: int = Field(..., ge=0, le=MAX_EPOCH_MS)
    time_of_day: TimeOfDay
    mood_score: int = Field(..., ge=1, le=5)

    def to_record(self) -> MoodLog:
        return MoodLog(timestamp=self.timestamp, time_of_day=self.time_of_day, mood_score=self.mood_score)


class ChallengeLogIn(BaseModel):
    challenge_id: str = Field(..., min_length=1, max_length=100)
    timestamp: int = Field(..., ge=0, le=MAX_EPOCH_MS)
    completed: bool
    difficulty: ChallengeDifficulty
    challenge_type: ChallengeType
    duration_minutes: int = Field(default=0, ge=0)

    def to_record(self) -> ChallengeLog:
        return ChallengeLog(
            challenge_id=self.challenge_id,
            timestamp=self.timestamp,
            completed=self.completed,
            difficulty=self.difficulty,
            challenge_type=self.challenge_type,
            duration_minutes=self.duration_minutes,
        )


# =============================================================================
# Request Schemas
# =============================================================================


class ScoreRequest(BaseModel):
    """Score a window of urge events."""

    urge_events: list[UrgeEventIn] = Field(default_factory=list)
    days_since_last_slip: int = Field(..., ge=0)
    previous_score: int | None = Field(default=None, ge=0)


class RiskRequest(BaseModel):
    """Forecast risk; ``now`` overrides the server clock."""

    urge_events: list[UrgeEventIn] = Field(default_factory=list)
    now: datetime | None = None


class InsightsRequest(BaseModel):
    urge_events: list[UrgeEventIn] = Field(default_factory=list)
    slip_logs: list[SlipLogIn] = Field(default_factory=list)


class LanguageCheckRequest(BaseModel):
    text: str = Field(..., max_length=5000)


class WeeklySummaryRequest(BaseModel):
    """Everything needed for the weekly review."""

    urge_events: list[UrgeEventIn] = Field(default_factory=list)
    slip_logs: list[SlipLogIn] = Field(default_factory=list)
    challenge_logs: list[ChallengeLogIn] = Field(default_factory=list)
    mood_logs: list[MoodLogIn] = Field(default_factory=list)
    days_since_last_slip: int = Field(..., ge=0)
    previous_score: int | None = Field(default=None, ge=0)
    now: datetime | None = None

    @field_validator("challenge_logs")
    @classmethod
    def validate_unique_challenges(cls, v: list[ChallengeLogIn]) -> list[ChallengeLogIn]:
        """The same challenge attempt must not be submitted twice."""
        seen = set()
        for log in v:
            key = (log.challenge_id, log.timestamp)
            if key in seen:
                raise ValueError(f"duplicate challenge log {log.challenge_id} at {log.timestamp}")
            seen.add(key)
        return v


__all__ = [
    "ChallengeLogIn",
    "InsightsRequest",
    "LanguageCheckRequest",
    "MoodLogIn",
    "RiskRequest",
    "ScoreRequest",
    "SlipLogIn",
    "UrgeEventIn",
    "WeeklySummaryRequest",
    "error_response",
    "success_response",
]
