"""
Tests for the HTTP layer.

The Strava client dependency is replaced by one backed by
httpx.MockTransport; the coach service gets a fixed reference time.
"""

from datetime import datetime

import httpx
import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from strava_coach.api.deps import (
    athlete_key,
    get_access_token,
    get_activity_cache,
    get_coach_service,
    get_strava_client,
)
from strava_coach.features.coach import CoachService
from strava_coach.features.strava import StravaClient
from strava_coach.main import app


AS_OF = datetime(2024, 3, 13, 20, 0)
AUTH = {"Authorization": "Bearer test-token"}

GPX_FILE = (
    b'<?xml version="1.0" encoding="UTF-8"?>'
    b'<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">'
    b"<trk><name>Loop</name><trkseg>"
    b'<trkpt lat="43.0" lon="76.0"><ele>800</ele></trkpt>'
    b'<trkpt lat="43.01" lon="76.0"><ele>850</ele></trkpt>'
    b'<trkpt lat="43.0" lon="76.0"><ele>800</ele></trkpt>'
    b"</trkseg></trk></gpx>"
)


class FakeStrava:
    """Canned Strava API; `failure` replaces every response when set."""

    def __init__(self, history):
        self.failure = None
        self.history = history

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.failure is not None:
            return self.failure

        path = request.url.path
        if path.endswith("/athlete/activities"):
            return httpx.Response(200, json=self.history)
        if path.endswith("/uploads"):
            return httpx.Response(201, json={"id": 7})
        if "/uploads/" in path:
            return httpx.Response(200, json={"id": 7, "activity_id": 555})
        for item in self.history:
            if path.endswith(f"/activities/{item['id']}"):
                return httpx.Response(200, json=item)
        return httpx.Response(404)


@pytest.fixture
def strava(make_run_json):
    return FakeStrava([
        make_run_json(id=1, name="Park Loop", start="2024-03-13T07:00:00"),
        make_run_json(id=2, name="Long Run", distance=10000.0, moving_time=4000,
                      start="2024-03-11T07:00:00"),
    ])


@pytest.fixture
def client(strava):
    async def fake_client(access_token: str = Depends(get_access_token)):
        async with StravaClient(
            access_token,
            base_url="https://strava.test/api/v3",
            transport=httpx.MockTransport(strava.handler),
        ) as strava_client:
            yield strava_client

    async def fixed_time_service(
        access_token: str = Depends(get_access_token),
        strava_client: StravaClient = Depends(get_strava_client),
        cache=Depends(get_activity_cache),
    ):
        return CoachService(strava_client, cache, user_id=athlete_key(access_token), now=AS_OF)

    app.dependency_overrides[get_strava_client] = fake_client
    app.dependency_overrides[get_coach_service] = fixed_time_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Test Health and Auth
# =============================================================================

class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuth:

    def test_missing_token(self, client):
        response = client.post("/api/v1/tools/training-summary", json={"days": 7})

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_wrong_scheme(self, client):
        response = client.post(
            "/api/v1/tools/training-summary",
            headers={"Authorization": "Basic abc"},
        )
        assert response.status_code == 401

    def test_athlete_key_is_stable_and_short(self):
        assert athlete_key("abc") == athlete_key("abc")
        assert athlete_key("abc") != athlete_key("abd")
        assert len(athlete_key("abc")) == 16


# =============================================================================
# Test Tools
# =============================================================================

class TestTrainingTools:

    def test_training_summary(self, client):
        response = client.post("/api/v1/tools/training-summary", json={"days": 7}, headers=AUTH)

        assert response.status_code == 200
        data = response.json()
        assert data["stats"]["total_runs"] == 2
        assert data["stats"]["total_distance"] == 15.0
        assert data["text"].startswith("Training summary for last 7 days: 2 runs")

    def test_body_optional(self, client):
        response = client.post("/api/v1/tools/training-summary", headers=AUTH)
        assert response.status_code == 200
        assert response.json()["period"]["start"] == "2024-03-06"

    def test_days_out_of_range(self, client):
        response = client.post("/api/v1/tools/training-summary", json={"days": 0}, headers=AUTH)
        assert response.status_code == 422

    def test_compare_weeks(self, client):
        response = client.post("/api/v1/tools/compare-weeks", headers=AUTH)

        assert response.status_code == 200
        data = response.json()
        assert data["current_week_start"] == "2024-03-10"
        assert data["current_week"]["run_count"] == 2
        assert data["changes"]["trend"] in {"improving", "stable", "declining"}

    def test_training_load(self, client):
        response = client.post("/api/v1/tools/training-load", headers=AUTH)

        assert response.status_code == 200
        assert response.json()["assessment"]["risk_band"] == "optimal"

    def test_coaching_advice(self, client):
        response = client.post(
            "/api/v1/tools/coaching-advice", json={"context": "recovery"}, headers=AUTH
        )

        assert response.status_code == 200
        assert response.json()["context"] == "recovery"

    def test_pace_patterns_by_distance(self, client):
        response = client.post(
            "/api/v1/tools/pace-patterns", json={"group_by": "distanceRange"}, headers=AUTH
        )

        assert response.status_code == 200
        data = response.json()
        assert data["group_by"] == "distanceRange"
        assert [g["group"] for g in data["groups"]] == ["5-10km", "10-15km"]

    def test_pace_patterns_unknown_grouping(self, client):
        response = client.post(
            "/api/v1/tools/pace-patterns", json={"group_by": "weekday"}, headers=AUTH
        )
        assert response.status_code == 422

    def test_run_progression_requires_route(self, client):
        response = client.post("/api/v1/tools/run-progression", json={}, headers=AUTH)
        assert response.status_code == 422

    def test_compare_runs(self, client):
        response = client.post(
            "/api/v1/tools/compare-runs", json={"first_id": 2, "second_id": 1}, headers=AUTH
        )

        assert response.status_code == 200
        assert response.json()["result"]["current"]["id"] == 1


# =============================================================================
# Test Error Mapping
# =============================================================================

class TestStravaErrors:

    def test_token_rejected_by_strava(self, client, strava):
        strava.failure = httpx.Response(401)
        response = client.post("/api/v1/tools/training-load", headers=AUTH)
        assert response.status_code == 401

    def test_rate_limited(self, client, strava):
        strava.failure = httpx.Response(429, headers={"Retry-After": "900"})
        response = client.post("/api/v1/tools/training-load", headers=AUTH)

        assert response.status_code == 429
        assert response.headers["retry-after"] == "900"

    def test_activity_not_found(self, client):
        response = client.post(
            "/api/v1/tools/compare-runs", json={"first_id": 1, "second_id": 999}, headers=AUTH
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Activity 999 not found"

    def test_strava_unavailable(self, client, strava):
        strava.failure = httpx.Response(503)
        response = client.post("/api/v1/tools/training-load", headers=AUTH)

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to fetch Strava data"


# =============================================================================
# Test Route Export
# =============================================================================

class TestExportRoute:

    ROUTE = {
        "name": "Riverside",
        "path": [{"lat": 43.0, "lng": 76.0}, {"lat": 43.01, "lng": 76.0}],
        "elevation_profile": [
            {"distance": 0.0, "elevation": 35},
            {"distance": 0.5, "elevation": 50},
            {"distance": 1.1, "elevation": 40},
        ],
    }

    def test_export(self, client):
        response = client.post("/api/v1/tools/export-route", json=self.ROUTE, headers=AUTH)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["strava_activity_id"] == 555
        assert data["strava_url"].endswith("/activities/555")
        assert data["elevation_gain"] == 15

    def test_path_too_short(self, client):
        route = dict(self.ROUTE, path=[{"lat": 43.0, "lng": 76.0}])
        response = client.post("/api/v1/tools/export-route", json=route, headers=AUTH)
        assert response.status_code == 422

    def test_upload_rejected(self, client, strava):
        strava.failure = httpx.Response(201, json={"id": 7, "error": "duplicate"})
        response = client.post("/api/v1/tools/export-route", json=self.ROUTE, headers=AUTH)

        assert response.status_code == 502
        assert "duplicate" in response.json()["detail"]


# =============================================================================
# Test GPX Inspection
# =============================================================================

class TestInspectGpx:

    def test_valid_file(self, client):
        response = client.post(
            "/api/v1/gpx/inspect",
            files={"file": ("loop.gpx", GPX_FILE, "application/gpx+xml")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Loop"
        assert data["points_count"] == 3
        assert data["is_loop"] is True

    def test_wrong_extension(self, client):
        response = client.post(
            "/api/v1/gpx/inspect",
            files={"file": ("loop.txt", GPX_FILE, "text/plain")},
        )
        assert response.status_code == 400

    def test_empty_file(self, client):
        response = client.post(
            "/api/v1/gpx/inspect",
            files={"file": ("loop.gpx", b"", "application/gpx+xml")},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "File is empty"

    def test_invalid_content(self, client):
        response = client.post(
            "/api/v1/gpx/inspect",
            files={"file": ("loop.gpx", b"<not-gpx", "application/gpx+xml")},
        )
        assert response.status_code == 400
        assert "Invalid GPX file" in response.json()["detail"]
