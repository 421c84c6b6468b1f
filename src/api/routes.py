"""
REST API Routes for Pause Tracker.

The API is stateless: clients send the already-windowed records and get
derived metrics back. All responses use the envelope from
src.api.schemas.

Endpoints (all under /api/v1 prefix):
- /health - Health check
- /score - Pause Score, label and optional trend
- /risk - Current risk level
- /insights - Pattern insights
- /language/check - Self-critical language screen
- /reflection-question - This week's reflection prompt
- /weekly-summary - Full weekly review bundle
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_timezone
from src.api.schemas import (
    InsightsRequest,
    LanguageCheckRequest,
    RiskRequest,
    ScoreRequest,
    WeeklySummaryRequest,
    success_response,
)
from src.services.insight_generator import (
    find_self_critical_phrases,
    generate_insights,
    get_week_index,
    get_weekly_reflection_question,
)
from src.services.risk_forecaster import get_risk_level
from src.services.score_engine import (
    calculate_pause_score,
    get_score_label,
    get_score_trend,
)
from src.services.weekly_summary import summarize_week

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Versioned health check."""
    return success_response({"status": "ok"})


@router.post("/score")
async def score(
    data: ScoreRequest,
    tz: tzinfo | None = Depends(get_timezone),
) -> dict[str, Any]:
    """
    Calculate the Pause Score for the submitted urge events.

    The trend is only included when ``previous_score`` is given.
    """
    events = [e.to_record() for e in data.urge_events]
    value = calculate_pause_score(events, data.days_since_last_slip, tz=tz)
    trend = get_score_trend(value, data.previous_score) if data.previous_score is not None else None
    return success_response({
        "score": value,
        "label": get_score_label(value),
        "trend": trend,
    })


@router.post("/risk")
async def risk(data: RiskRequest) -> dict[str, Any]:
    """Forecast risk from the trailing 24 hours of the submitted urges."""
    events = [e.to_record() for e in data.urge_events]
    return success_response(get_risk_level(events, now=data.now))


@router.post("/insights")
async def insights(
    data: InsightsRequest,
    tz: tzinfo | None = Depends(get_timezone),
) -> dict[str, Any]:
    result = generate_insights(
        [e.to_record() for e in data.urge_events],
        [s.to_record() for s in data.slip_logs],
        tz=tz,
    )
    return success_response({"insights": result, "total": len(result)})


@router.post("/language/check")
async def language_check(data: LanguageCheckRequest) -> dict[str, Any]:
    """Screen free text for self-critical language."""
    phrases = find_self_critical_phrases(data.text)
    return success_response({"is_self_critical": bool(phrases), "phrases": phrases})


@router.get("/reflection-question")
async def reflection_question(
    week_index: int | None = Query(default=None, ge=0),
) -> dict[str, Any]:
    """Reflection prompt for ``week_index``, or for the current week."""
    index = week_index if week_index is not None else get_week_index()
    return success_response({
        "week_index": index,
        "question": get_weekly_reflection_question(index),
    })


@router.post("/weekly-summary")
async def weekly_summary(
    data: WeeklySummaryRequest,
    tz: tzinfo | None = Depends(get_timezone),
) -> dict[str, Any]:
    summary = summarize_week(
        urge_events=[e.to_record() for e in data.urge_events],
        slip_logs=[s.to_record() for s in data.slip_logs],
        challenge_logs=[c.to_record() for c in data.challenge_logs],
        mood_logs=[m.to_record() for m in data.mood_logs],
        days_since_last_slip=data.days_since_last_slip,
        previous_score=data.previous_score,
        now=data.now,
        tz=tz,
    )
    return success_response(summary)


__all__ = ["router"]
