"""
Services for Pause Tracker.

This package contains the pure computations behind the tracker screens.

Services:
    - Score Engine: Pause Score, trend and labels
    - Risk Forecaster: Risk level from the trailing 24 hours
    - Insight Generator: Pattern insights, self-critical language, reflection prompts
    - Weekly Summary: Weekly review aggregates
"""

from .insight_generator import (
    contains_self_critical_language,
    generate_insights,
    get_week_index,
    get_weekly_reflection_question,
)
from .risk_forecaster import get_risk_level
from .score_engine import (
    calculate_pause_score,
    days_since_last_slip,
    get_score_label,
    get_score_trend,
)
from .weekly_summary import WeeklySummary, summarize_week

__all__ = [
    # Score Engine
    "calculate_pause_score",
    "days_since_last_slip",
    "get_score_label",
    "get_score_trend",
    # Risk Forecaster
    "get_risk_level",
    # Insight Generator
    "contains_self_critical_language",
    "generate_insights",
    "get_week_index",
    "get_weekly_reflection_question",
    # Weekly Summary
    "WeeklySummary",
    "summarize_week",
]
