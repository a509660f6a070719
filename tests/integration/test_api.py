"""Integration tests for the pollenTracker REST API.

Tests the full request/response cycle through FastAPI's TestClient with an
in-memory record store and a mocked exposure provider.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.api.auth import create_owner_token
from src.config.settings import Settings
from src.main import create_app
from src.models.feedback import ExposureReading
from src.services.analysis_service import AnalysisService
from src.services.feedback_service import FeedbackService
from src.utils.errors import PersistenceError

_SECRET = "integration-secret"


def _auth(owner_id: str = "alice") -> dict[str, str]:
    return {"Authorization": f"Bearer {create_owner_token(owner_id, _SECRET)}"}


def _body(feedback=3, lat=51.5, lng=-0.12) -> dict:
    return {"feedback": feedback, "location": {"lat": lat, "lng": lng}}


@pytest.fixture
def client(memory_store, mock_exposure_provider):
    """TestClient wired with pre-built components."""
    app = create_app(
        app_settings=Settings(auth_secret=_SECRET, store_backend="memory"),
        components={
            "feedback_store": memory_store,
            "exposure_provider": mock_exposure_provider,
            "feedback_service": FeedbackService(memory_store, mock_exposure_provider),
            "analysis_service": AnalysisService(memory_store),
            "auth_secret": _SECRET,
        },
    )
    with TestClient(app) as c:
        yield c


# ─── Authentication ───────────────────────────────────────────────

class TestAuthentication:
    def test_missing_header(self, client):
        response = client.post("/api/v1/feedback", json=_body())
        assert response.status_code == 401
        assert response.json() == {
            "error": "unauthenticated",
            "detail": "The function must be called while authenticated.",
        }

    def test_bad_signature(self, client):
        response = client.get(
            "/api/v1/analysis", headers={"Authorization": "Bearer alice.deadbeef"},
        )
        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    def test_wrong_scheme(self, client):
        token = create_owner_token("alice", _SECRET)
        response = client.get("/api/v1/analysis", headers={"Authorization": f"Basic {token}"})
        assert response.status_code == 401


# ─── Submit feedback ──────────────────────────────────────────────

class TestSubmitFeedback:
    def test_valid_submission(self, client, memory_store):
        response = client.post("/api/v1/feedback", json=_body(), headers=_auth())

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["recordId"]
        assert data["readings"] == [
            {"category": "oak", "exposureLevel": 3.0},
            {"category": "grass", "exposureLevel": 1.0},
        ]

    def test_missing_feedback(self, client):
        response = client.post(
            "/api/v1/feedback", json={"location": {"lat": 1, "lng": 2}}, headers=_auth(),
        )
        assert response.status_code == 400
        assert response.json() == {
            "error": "invalid-argument",
            "detail": "Missing required field: 'feedback'",
        }

    def test_empty_body(self, client):
        response = client.post("/api/v1/feedback", headers=_auth())
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing data payload"

    def test_bad_coordinates(self, client):
        response = client.post(
            "/api/v1/feedback", json=_body(lat="not-a-number"), headers=_auth(),
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Location coordinates must be valid numbers"

    def test_lookup_failure_still_stores(self, client, mock_exposure_provider):
        mock_exposure_provider.lookup = AsyncMock(side_effect=TimeoutError("slow"))
        response = client.post("/api/v1/feedback", json=_body(), headers=_auth())
        assert response.status_code == 200
        assert response.json()["readings"] == []

    def test_store_failure_is_internal(self, client, memory_store):
        memory_store.append_record = AsyncMock(side_effect=PersistenceError("disk full"))
        response = client.post("/api/v1/feedback", json=_body(), headers=_auth())
        assert response.status_code == 500
        assert response.json() == {"error": "internal", "detail": "disk full"}


# ─── Analysis ─────────────────────────────────────────────────────

class TestAnalysis:
    def test_oak_history_is_significant(self, client, mock_exposure_provider):
        mock_exposure_provider.lookup = AsyncMock(side_effect=[
            [ExposureReading(category="oak", exposure_level=level)] for level in (1, 2, 3)
        ])
        for score in (2, 4, 6):
            response = client.post("/api/v1/feedback", json=_body(feedback=score), headers=_auth())
            assert response.status_code == 200

        response = client.get("/api/v1/analysis", headers=_auth())

        assert response.status_code == 200
        data = response.json()
        assert data["ownerId"] == "alice"
        assert data["dataPoints"] == 3
        oak = data["correlations"]["oak"]
        assert oak["correlation"] == pytest.approx(1.0)
        assert oak["significance"] == 0.0
        assert oak["significant"] is True
        assert oak["error"] is None
        assert "analyzedAt" in data

    def test_overflowing_feedback_is_reported_not_significant(self, client, mock_exposure_provider):
        mock_exposure_provider.lookup = AsyncMock(side_effect=[
            [ExposureReading(category="oak", exposure_level=level)] for level in (1, 2, 3)
        ])
        for score in ("1e200", "2e200", "4e200"):
            response = client.post("/api/v1/feedback", json=_body(feedback=score), headers=_auth())
            assert response.status_code == 200

        response = client.get("/api/v1/analysis", headers=_auth())

        assert response.status_code == 200
        assert response.json()["correlations"]["oak"] == {
            "correlation": 0.0,
            "significance": 1.0,
            "significant": False,
            "error": "non-finite correlation",
        }
        latest = client.get("/api/v1/analysis/latest", headers=_auth())
        assert latest.status_code == 200
        assert latest.json() == response.json()

    def test_linear_decimal_feedback_is_significant(self, client, mock_exposure_provider):
        mock_exposure_provider.lookup = AsyncMock(side_effect=[
            [ExposureReading(category="oak", exposure_level=level)] for level in (1, 2, 3)
        ])
        for score in (0.7, 1.4, 2.1):
            client.post("/api/v1/feedback", json=_body(feedback=score), headers=_auth())

        oak = client.get("/api/v1/analysis", headers=_auth()).json()["correlations"]["oak"]

        assert oak["significant"] is True
        assert oak["error"] is None

    def test_no_history(self, client):
        response = client.get("/api/v1/analysis", headers=_auth("newcomer"))
        assert response.status_code == 200
        data = response.json()
        assert data["dataPoints"] == 0
        assert data["correlations"] == {}

    def test_other_owners_data_is_invisible(self, client):
        for score in (1, 2, 3):
            client.post("/api/v1/feedback", json=_body(feedback=score), headers=_auth("alice"))

        data = client.get("/api/v1/analysis", headers=_auth("bob")).json()

        assert data["ownerId"] == "bob"
        assert data["dataPoints"] == 0

    def test_text_feedback_is_stored_but_not_counted(self, client):
        client.post("/api/v1/feedback", json=_body(feedback="very itchy"), headers=_auth())
        client.post("/api/v1/feedback", json=_body(feedback=2), headers=_auth())

        data = client.get("/api/v1/analysis", headers=_auth()).json()

        assert data["dataPoints"] == 1

    def test_latest_before_and_after_run(self, client):
        response = client.get("/api/v1/analysis/latest", headers=_auth())
        assert response.status_code == 404

        ran = client.get("/api/v1/analysis", headers=_auth()).json()
        latest = client.get("/api/v1/analysis/latest", headers=_auth())

        assert latest.status_code == 200
        assert latest.json() == ran


# ─── Health ───────────────────────────────────────────────────────

class TestHealth:
    def test_health_needs_no_auth(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["store"] == "memory_feedback"
        assert data["exposure"] == "mock_exposure"
        assert data["exposure_available"] is True

    def test_request_id_is_echoed(self, client):
        response = client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_is_generated(self, client):
        response = client.get("/api/v1/health")
        assert len(response.headers["X-Request-ID"]) == 32
