"""
Tests for CoachService.

Strava is faked with httpx.MockTransport. The fake ignores query
parameters and always returns the same history, so every window filter
under test is applied by the service itself.

History (reference time Wednesday 2024-03-13 20:00):
    1  2024-03-13  Park Loop       5 km  @ 4:10
    2  2024-03-11  Long River Run  10 km @ 6:40, 120 m climb
    3  2024-03-05  Park Loop       6 km  @ 6:40
    4  2024-03-12  Ride (not a run)
"""

import httpx
import pytest

from strava_coach.features.coach.schemas import (
    ElevationPoint,
    PaceGrouping,
    RouteExportRequest,
    RoutePoint,
)
from strava_coach.features.coach.service import CoachService, route_to_track_points
from strava_coach.features.gpx import encode_polyline
from strava_coach.features.strava import (
    ActivityCache,
    ActivityNotFoundError,
    StravaClient,
    StravaUploader,
)
from strava_coach.features.training import RiskBand, TrainingState, Trend


USER = "athlete-1"


class FakeStrava:
    """Request log plus canned responses for the endpoints the service uses."""

    def __init__(self, history):
        self.history = history
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append((request.method, path))

        if path.endswith("/athlete/activities"):
            return httpx.Response(200, json=self.history)

        if path.endswith("/uploads") and request.method == "POST":
            return httpx.Response(201, json={"id": 7, "status": "processing"})

        if "/uploads/" in path:
            return httpx.Response(200, json={"id": 7, "status": "ready", "activity_id": 555})

        if "/activities/" in path:
            activity_id = int(path.rsplit("/", 1)[-1])
            for item in self.history:
                if item["id"] == activity_id:
                    return httpx.Response(200, json=item)
            return httpx.Response(404, json={"message": "Record Not Found"})

        return httpx.Response(404)

    def count(self, suffix: str) -> int:
        return sum(1 for _, path in self.requests if path.endswith(suffix))

    def client(self) -> StravaClient:
        return StravaClient(
            "test-token",
            base_url="https://strava.test/api/v3",
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def strava(make_run_json):
    return FakeStrava([
        make_run_json(id=1, name="Park Loop", distance=5000.0, moving_time=1250,
                      start="2024-03-13T07:00:00"),
        make_run_json(id=4, name="Commute", type="Ride", distance=20000.0, moving_time=3000,
                      start="2024-03-12T08:00:00"),
        make_run_json(id=2, name="Long River Run", distance=10000.0, moving_time=4000,
                      elevation=120.0, start="2024-03-11T07:00:00"),
        make_run_json(id=3, name="Park Loop", distance=6000.0, moving_time=2400,
                      start="2024-03-05T07:00:00"),
    ])


def make_service(client, as_of, cache=None) -> CoachService:
    return CoachService(client, cache or ActivityCache(), user_id=USER, now=as_of)


# =============================================================================
# Test Training Summary and Caching
# =============================================================================

class TestTrainingSummary:

    @pytest.mark.asyncio
    async def test_last_seven_days(self, strava, as_of):
        async with strava.client() as client:
            response = await make_service(client, as_of).training_summary(days=7)

        assert response.stats.total_runs == 2
        assert response.stats.total_distance == 15.0
        assert response.stats.avg_pace == "5:50"
        assert response.stats.total_time == 88
        assert str(response.period.start) == "2024-03-06"
        assert str(response.period.end) == "2024-03-13"
        assert [r.date for r in response.runs] == ["2024-03-13", "2024-03-11"]
        assert response.text == (
            "Training summary for last 7 days: 2 runs, 15.0km total, 5:50/km average pace."
        )

    @pytest.mark.asyncio
    async def test_cache_shared_across_tools(self, strava, as_of):
        cache = ActivityCache()
        async with strava.client() as client:
            service = make_service(client, as_of, cache)
            await service.training_summary(days=7)
            await service.training_summary(days=14)
            await service.elevation_trends(days=30)
            await service.compare_training_weeks()

        assert strava.count("/athlete/activities") == 1
        assert cache.stats()["keys"] == [f"{USER}:30:false"]

    @pytest.mark.asyncio
    async def test_longer_window_fetches_again(self, strava, as_of):
        cache = ActivityCache()
        async with strava.client() as client:
            service = make_service(client, as_of, cache)
            await service.training_summary(days=7)
            await service.run_progression("park loop", days=90)

        assert strava.count("/athlete/activities") == 2

    @pytest.mark.asyncio
    async def test_empty_history(self, as_of):
        empty = FakeStrava([])
        async with empty.client() as client:
            response = await make_service(client, as_of).training_summary()

        assert response.stats.total_runs == 0
        assert response.stats.avg_pace == "0:00"
        assert response.runs == []


# =============================================================================
# Test Comparison and Load Tools
# =============================================================================

class TestCompareTrainingWeeks:

    @pytest.mark.asyncio
    async def test_current_against_previous(self, strava, as_of):
        async with strava.client() as client:
            response = await make_service(client, as_of).compare_training_weeks()

        assert str(response.current_week_start) == "2024-03-10"
        assert str(response.previous_week_start) == "2024-03-03"
        assert response.current_week.run_count == 2
        assert response.previous_week.total_distance_km == 6.0
        assert response.changes.distance_delta_percent == 150
        assert response.changes.pace_delta_seconds == -50
        assert response.changes.trend == Trend.IMPROVING
        assert response.text == (
            "Week comparison: Distance +150%, Runs +1, Pace -50s/km. Trend: improving"
        )


class TestCoachingAdvice:

    @pytest.mark.asyncio
    async def test_recent_load(self, strava, as_of):
        async with strava.client() as client:
            response = await make_service(client, as_of).coaching_advice("recovery")

        assert response.context == "recovery"
        assert response.recent_load.last_7_days_km == 15.0
        assert response.recent_load.last_3_days_km == 15.0
        assert response.recent_load.consecutive_days == 1
        assert response.recent_load.training_state == TrainingState.FRESH
        assert response.text == (
            "Training load: 15.0km in 7 days, 15.0km in last 3 days. "
            "1 consecutive days. State: fresh"
        )


class TestTrainingLoad:

    @pytest.mark.asyncio
    async def test_windows(self, strava, as_of):
        async with strava.client() as client:
            response = await make_service(client, as_of).training_load()

        assert response.acute.count == 2
        assert response.chronic.count == 3
        assert response.chronic.load == pytest.approx(20.0)
        assert response.assessment.risk_band == RiskBand.UNDERTRAINING
        assert "undertraining" in response.text


# =============================================================================
# Test Analysis Tools
# =============================================================================

class TestElevationTrends:

    @pytest.mark.asyncio
    async def test_hilliest_first(self, strava, as_of):
        async with strava.client() as client:
            response = await make_service(client, as_of).elevation_trends(days=30, top_n=2)

        assert response.summary.total_activities == 3
        assert response.summary.average_elevation_gain == 40
        assert [r.id for r in response.runs][0] == 2
        assert len(response.runs) == 2


class TestPacePatterns:

    @pytest.mark.asyncio
    async def test_by_run_type(self, strava, as_of):
        async with strava.client() as client:
            response = await make_service(client, as_of).pace_patterns()

        assert response.group_by == PaceGrouping.RUN_TYPE
        assert response.total_runs == 3
        assert [g.group for g in response.groups] == ["easy"]

    @pytest.mark.asyncio
    async def test_by_distance_range(self, strava, as_of):
        async with strava.client() as client:
            response = await make_service(client, as_of).pace_patterns(
                group_by=PaceGrouping.DISTANCE_RANGE
            )

        assert [g.group for g in response.groups] == ["5-10km", "10-15km"]
        assert response.groups[0].count == 2


class TestRunProgression:

    @pytest.mark.asyncio
    async def test_route_matches(self, strava, as_of):
        async with strava.client() as client:
            response = await make_service(client, as_of).run_progression("park loop")

        assert [e.id for e in response.progression] == [3, 1]
        assert response.summary.best_pace == "4:10"
        assert response.summary.trend == Trend.IMPROVING

    @pytest.mark.asyncio
    async def test_no_match(self, strava, as_of):
        async with strava.client() as client:
            response = await make_service(client, as_of).run_progression("hill repeats")

        assert response.progression == []
        assert response.summary is None
        assert response.text == "No runs matching 'hill repeats' in the last 90 days."


class TestCompareRuns:

    @pytest.mark.asyncio
    async def test_by_id(self, strava, as_of):
        async with strava.client() as client:
            response = await make_service(client, as_of).compare_runs(3, 1)

        assert response.result.baseline.id == 3
        assert response.result.current.id == 1
        assert response.result.comparison.pace_delta_seconds == pytest.approx(-150.0)
        assert response.text.startswith("'Park Loop' vs 'Park Loop'")
        assert strava.count("/activities/3") == 1

    @pytest.mark.asyncio
    async def test_unknown_activity(self, strava, as_of):
        async with strava.client() as client:
            with pytest.raises(ActivityNotFoundError):
                await make_service(client, as_of).compare_runs(3, 999)


# =============================================================================
# Test Route Export
# =============================================================================

def _route_request(**overrides) -> RouteExportRequest:
    data = dict(
        name="Riverside 1k",
        path=[RoutePoint(lat=43.0, lng=76.0), RoutePoint(lat=43.01, lng=76.0)],
        elevation_profile=[
            ElevationPoint(distance=d, elevation=e)
            for d, e in [(0.0, 35), (0.25, 40), (0.5, 50), (0.75, 45), (1.0, 35)]
        ],
    )
    data.update(overrides)
    return RouteExportRequest(**data)


class TestRouteToTrackPoints:

    def test_profile_sampled_by_position(self):
        points = route_to_track_points(_route_request())
        assert [p.elevation for p in points] == [35, 50]

    def test_no_profile(self):
        points = route_to_track_points(_route_request(elevation_profile=[]))
        assert all(p.elevation is None for p in points)


class TestExportRoute:

    @pytest.mark.asyncio
    async def test_upload(self, strava, as_of):
        request = _route_request(activity_name="Evening shakeout")
        async with strava.client() as client:
            response = await make_service(client, as_of).export_route(
                request, StravaUploader(client)
            )

        assert response.success is True
        assert response.strava_activity_id == 555
        assert response.strava_url == "https://www.strava.com/activities/555"
        assert response.route_name == "Evening shakeout"
        assert response.distance == 1.1
        assert response.elevation_gain == 15
        assert response.polyline == encode_polyline([(43.0, 76.0), (43.01, 76.0)])
        assert strava.requests[-2:] == [
            ("POST", "/api/v3/uploads"),
            ("GET", "/api/v3/uploads/7"),
        ]

    @pytest.mark.asyncio
    async def test_route_name_fallback(self, strava, as_of):
        async with strava.client() as client:
            response = await make_service(client, as_of).export_route(
                _route_request(elevation_profile=[]), StravaUploader(client)
            )

        assert response.route_name == "Riverside 1k"
        assert response.elevation_gain == 0
