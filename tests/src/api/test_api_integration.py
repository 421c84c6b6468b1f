"""
Integration tests for the Pause Tracker REST API.

Tests the full HTTP request/response cycle using httpx AsyncClient
against the actual FastAPI application.

Covers:
- Health endpoints (root + versioned)
- Score, risk, insights, language check, reflection question, weekly summary
- Request validation (422 envelope on out-of-range values and timestamps)
- Error envelopes for 404 and unhandled exceptions, localized via Accept-Language
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
from fastapi import Request
from httpx import ASGITransport, AsyncClient

from src.api import create_app, request_language
from src.config.settings import Settings
from src.lib.clock import MAX_EPOCH_MS, to_epoch_ms
from src.services.insight_generator import REFLECTION_QUESTIONS

NOW = datetime(2026, 10, 14, 15, 0, tzinfo=UTC)


def _urge(at: datetime, duration: int = 60, intensity: int = 5, **extra) -> dict:
    return {
        "timestamp": to_epoch_ms(at),
        "duration_seconds": duration,
        "intensity_rating": intensity,
        **extra,
    }


def _assert_validation_error(resp) -> None:
    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["data"] is None
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["details"]["errors"]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def app():
    """Fresh app on a UTC calendar so hour and day rules are deterministic."""
    return create_app(Settings(timezone=UTC))


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


# =============================================================================
# Health
# =============================================================================


class TestHealth:

    @pytest.mark.asyncio
    async def test_root_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_versioned_health(self, client):
        resp = await client.get("/api/v1/health")
        assert resp.json() == {"success": True, "data": {"status": "ok"}, "error": None}


# =============================================================================
# Score
# =============================================================================


class TestScoreEndpoint:

    @pytest.mark.asyncio
    async def test_empty_score(self, client):
        resp = await client.post("/api/v1/score", json={"days_since_last_slip": 10})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data == {"score": 0, "label": "Starting Out", "trend": None}

    @pytest.mark.asyncio
    async def test_score_with_trend(self, client):
        body = {
            "urge_events": [
                _urge(NOW, duration=100, intensity=8),
                _urge(NOW, duration=40, intensity=3),
            ],
            "days_since_last_slip": 0,
            "previous_score": 70,
        }
        data = (await client.post("/api/v1/score", json=body)).json()["data"]
        assert data["score"] == 76
        assert data["label"] == "Strong"
        assert data["trend"] == "up"

    @pytest.mark.asyncio
    async def test_consistency_uses_configured_timezone(self, client):
        events = [_urge(NOW - timedelta(days=d), duration=100) for d in range(5)]
        body = {"urge_events": events, "days_since_last_slip": 0}
        data = (await client.post("/api/v1/score", json=body)).json()["data"]
        assert data["score"] == 110

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "override",
        [{"intensity_rating": 11}, {"intensity_rating": 0}, {"duration_seconds": -1}, {"level": 4}],
    )
    async def test_rejects_out_of_range(self, client, override):
        event = {**_urge(NOW), **override}
        resp = await client.post(
            "/api/v1/score",
            json={"urge_events": [event], "days_since_last_slip": 0},
        )
        _assert_validation_error(resp)

    @pytest.mark.asyncio
    async def test_rejects_negative_days(self, client):
        resp = await client.post("/api/v1/score", json={"days_since_last_slip": -1})
        _assert_validation_error(resp)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("timestamp", [MAX_EPOCH_MS + 1, 10**18, -1])
    async def test_rejects_unrepresentable_timestamp(self, client, timestamp):
        event = {**_urge(NOW), "timestamp": timestamp}
        resp = await client.post(
            "/api/v1/score",
            json={"urge_events": [event], "days_since_last_slip": 0},
        )
        _assert_validation_error(resp)

    @pytest.mark.asyncio
    async def test_accepts_latest_timestamp(self, client):
        event = {**_urge(NOW, duration=42), "timestamp": MAX_EPOCH_MS}
        resp = await client.post(
            "/api/v1/score",
            json={"urge_events": [event], "days_since_last_slip": 0},
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["score"] == 42

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("path", "record"),
        [
            ("/api/v1/insights", {"slip_logs": [{"timestamp": 10**18}]}),
            (
                "/api/v1/weekly-summary",
                {
                    "days_since_last_slip": 0,
                    "mood_logs": [{"timestamp": 10**18, "time_of_day": "morning", "mood_score": 3}],
                },
            ),
        ],
    )
    async def test_timestamp_bound_on_every_record(self, client, path, record):
        _assert_validation_error(await client.post(path, json=record))


# =============================================================================
# Risk
# =============================================================================


class TestRiskEndpoint:

    @pytest.mark.asyncio
    async def test_high_risk(self, client):
        body = {
            "urge_events": [_urge(NOW - timedelta(hours=h), intensity=9) for h in (1, 2)],
            "now": NOW.isoformat(),
        }
        data = (await client.post("/api/v1/risk", json=body)).json()["data"]
        assert data["level"] == "high"
        assert data["label"] == "Elevated today"
        assert data["description"]

    @pytest.mark.asyncio
    async def test_stale_events_low(self, client):
        body = {
            "urge_events": [_urge(NOW - timedelta(hours=24), intensity=9) for _ in range(5)],
            "now": NOW.isoformat(),
        }
        data = (await client.post("/api/v1/risk", json=body)).json()["data"]
        assert data["level"] == "low"


# =============================================================================
# Insights & language
# =============================================================================


class TestInsightsEndpoint:

    @pytest.mark.asyncio
    async def test_cold_start(self, client):
        data = (await client.post("/api/v1/insights", json={})).json()["data"]
        assert data["total"] == 1
        assert data["insights"][0]["id"] == "no-data"
        assert data["insights"][0]["action_route"] == "/urge"

    @pytest.mark.asyncio
    async def test_evening_and_trigger(self, client):
        evening = datetime(2026, 10, 13, 21, 0, tzinfo=UTC)
        body = {
            "urge_events": [_urge(evening), _urge(evening + timedelta(hours=2))],
            "slip_logs": [
                {"timestamp": to_epoch_ms(evening), "trigger_categories": ["Stress"]}
                for _ in range(3)
            ],
        }
        data = (await client.post("/api/v1/insights", json=body)).json()["data"]
        assert [i["id"] for i in data["insights"]] == ["evening-pattern", "trigger-pattern"]


class TestLanguageEndpoint:

    @pytest.mark.asyncio
    async def test_self_critical(self, client):
        resp = await client.post("/api/v1/language/check", json={"text": "I feel so worthless today"})
        assert resp.json()["data"] == {"is_self_critical": True, "phrases": ["worthless"]}

    @pytest.mark.asyncio
    async def test_neutral(self, client):
        resp = await client.post("/api/v1/language/check", json={"text": "I had a rough day"})
        assert resp.json()["data"] == {"is_self_critical": False, "phrases": []}


class TestReflectionEndpoint:

    @pytest.mark.asyncio
    async def test_explicit_week(self, client):
        n = len(REFLECTION_QUESTIONS)
        first = (await client.get("/api/v1/reflection-question", params={"week_index": 0})).json()
        wrapped = (await client.get("/api/v1/reflection-question", params={"week_index": n})).json()
        assert first["data"]["question"] == wrapped["data"]["question"] == REFLECTION_QUESTIONS[0]

    @pytest.mark.asyncio
    async def test_current_week(self, client, fixed_clock):
        data = (await client.get("/api/v1/reflection-question")).json()["data"]
        assert data["week_index"] == to_epoch_ms(fixed_clock.now()) // (7 * 86_400_000)

    @pytest.mark.asyncio
    async def test_negative_week_rejected(self, client):
        resp = await client.get("/api/v1/reflection-question", params={"week_index": -1})
        _assert_validation_error(resp)


# =============================================================================
# Weekly summary
# =============================================================================


class TestWeeklySummaryEndpoint:

    @pytest.mark.asyncio
    async def test_summary(self, client):
        body = {
            "urge_events": [_urge(NOW - timedelta(days=d), duration=90, intensity=4) for d in range(5)],
            "slip_logs": [{"timestamp": to_epoch_ms(NOW), "trigger_categories": ["Stress"]}],
            "challenge_logs": [
                {
                    "challenge_id": "walk",
                    "timestamp": to_epoch_ms(NOW),
                    "completed": True,
                    "difficulty": "beginner",
                    "challenge_type": "physical",
                },
            ],
            "mood_logs": [{"timestamp": to_epoch_ms(NOW), "time_of_day": "morning", "mood_score": 4}],
            "days_since_last_slip": 3,
            "previous_score": 99,
            "now": NOW.isoformat(),
        }
        resp = await client.post("/api/v1/weekly-summary", json=body)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["score"] == 99
        assert data["trend"] == "flat"
        assert data["pause_rate"] == 100
        assert data["top_trigger"] == ["Stress", 0.5]
        assert data["challenges"]["pct"] == 14
        assert data["challenges"]["by_type"]["physical"] == {"done": 1, "total": 1}
        assert data["mood"] == {"morning": 4.0, "evening": None}
        assert data["risk"]["level"] == "low"
        assert len(data["daily_activity"]) == 7

    @pytest.mark.asyncio
    async def test_duplicate_challenge_rejected(self, client):
        log = {
            "challenge_id": "walk",
            "timestamp": 1,
            "completed": True,
            "difficulty": "beginner",
            "challenge_type": "physical",
        }
        resp = await client.post(
            "/api/v1/weekly-summary",
            json={"challenge_logs": [log, log], "days_since_last_slip": 0},
        )
        _assert_validation_error(resp)


# =============================================================================
# Errors
# =============================================================================


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_unhandled_exception_envelope(self, app):
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            with patch("src.api.routes.find_self_critical_phrases", side_effect=RuntimeError("boom")):
                resp = await ac.post("/api/v1/language/check", json={"text": "hi"})
        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "INTERNAL_ERROR"

    @pytest.mark.asyncio
    async def test_unknown_path_envelope(self, client):
        resp = await client.get("/api/v1/nope")
        assert resp.status_code == 404
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == {
            "code": "NOT_FOUND",
            "message": "The requested resource was not found.",
        }

    @pytest.mark.asyncio
    async def test_validation_message_follows_accept_language(self, client):
        resp = await client.post(
            "/api/v1/score",
            json={"days_since_last_slip": -1},
            headers={"Accept-Language": "de-DE,de;q=0.9,en;q=0.8"},
        )
        _assert_validation_error(resp)
        assert resp.json()["error"]["message"].startswith("Ungueltige Eingabe")

    @pytest.mark.asyncio
    async def test_unsupported_language_falls_back_to_english(self, client):
        resp = await client.get("/api/v1/nope", headers={"Accept-Language": "fr"})
        assert resp.json()["error"]["message"] == "The requested resource was not found."

    @pytest.mark.asyncio
    async def test_validation_details_name_the_field(self, client):
        resp = await client.post("/api/v1/score", json={"days_since_last_slip": -1})
        errors = resp.json()["error"]["details"]["errors"]
        assert errors[0]["loc"] == ["body", "days_since_last_slip"]


# =============================================================================
# Request language
# =============================================================================


class TestRequestLanguage:

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("de-DE,de;q=0.9,en;q=0.8", "de"),
            ("EN-us", "en"),
            ("de;q=0.7", "de"),
            ("", "en"),
        ],
    )
    def test_primary_subtag(self, header, expected):
        headers = [(b"accept-language", header.encode())] if header else []
        request = Request({"type": "http", "headers": headers})
        assert request_language(request) == expected
