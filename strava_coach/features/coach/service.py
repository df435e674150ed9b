"""
Coach Service.

One method per coaching tool. Each method fetches the athlete's runs
(through the activity cache), runs the training engines and wraps the
result in a response model with a short text summary.
"""

import logging
import math
from datetime import date, datetime, timedelta
from typing import List, Optional

from strava_coach.config import settings
from strava_coach.features.activities import (
    ActivityRecord,
    activity_to_summary,
    average_pace,
    records_in_last_days,
    total_distance_km,
    total_moving_minutes,
)
from strava_coach.features.gpx import (
    GPXMetadata,
    GPXTrackPoint,
    encode_polyline,
    generate_gpx,
    validate_gpx,
)
from strava_coach.features.strava import (
    ActivityCache,
    StravaClient,
    StravaUploader,
)
from strava_coach.features.training import (
    GROUP_KEYS,
    aggregate_runs,
    assess_training_load,
    build_progression,
    compare_aggregates,
    compare_runs,
    group_paces,
    matches_route,
    recent_load,
    split_weeks,
    summarize_elevation,
    summarize_progression,
    top_hilly_runs,
    week_bounds,
)
from strava_coach.shared.constants import ACUTE_WINDOW_DAYS, CHRONIC_WINDOW_DAYS
from strava_coach.shared.elevation import calculate_elevation_changes
from strava_coach.shared.formatters import format_signed
from strava_coach.shared.formulas import round_half_up, round_to_tenth
from strava_coach.shared.geo import path_distance_km

from .schemas import (
    CoachingAdviceResponse,
    ElevationTrendsResponse,
    PaceGrouping,
    PacePatternsResponse,
    Period,
    RouteExportRequest,
    RouteExportResponse,
    RunComparisonResponse,
    RunProgressionResponse,
    TrainingLoadResponse,
    TrainingStats,
    TrainingSummaryResponse,
    WeekComparisonResponse,
)

logger = logging.getLogger(__name__)


def route_to_track_points(request: RouteExportRequest) -> List[GPXTrackPoint]:
    """
    Attach elevations to a planned path.

    The profile is sampled by relative position: point i of n takes the
    profile entry at floor(i / n * len(profile)). Without a profile the
    points carry no elevation.
    """
    profile = request.elevation_profile
    count = len(request.path)
    points = []

    for index, point in enumerate(request.path):
        elevation = None
        if profile:
            elevation = profile[math.floor(index / count * len(profile))].elevation
        points.append(GPXTrackPoint(lat=point.lat, lng=point.lng, elevation=elevation))

    return points


class CoachService:
    """
    Coaching tools for one athlete.

    Args:
        client: Open Strava client for the athlete's token
        cache: Activity cache shared across requests
        user_id: Cache namespace of the athlete
        now: Local reference time; defaults to the current time
    """

    def __init__(
        self,
        client: StravaClient,
        cache: ActivityCache,
        user_id: str,
        now: Optional[datetime] = None,
    ):
        self.client = client
        self.cache = cache
        self.user_id = user_id
        self.now = now or datetime.now()

    async def _fetch_runs(self, days: int, include_details: bool = False) -> List[ActivityRecord]:
        """Runs of the last `days` days, served from the cache when possible."""
        entry = self.cache.get(self.user_id, days, include_details)
        if entry is not None:
            logger.debug(f"Cache hit for {self.user_id} ({days} days, details={include_details})")
            return entry.records

        records = await self.client.get_activities_with_details(
            days, include_details=include_details, now=self.now
        )
        return self.cache.set(self.user_id, days, include_details, records).records

    async def _recent_runs(self, days: int) -> List[ActivityRecord]:
        fetch_days = max(days, settings.activity_fetch_days)
        records = await self._fetch_runs(fetch_days)
        return records_in_last_days(records, self.now, days)

    # -------------------------------------------------------------------------
    # Tools
    # -------------------------------------------------------------------------

    async def training_summary(self, days: int = 7) -> TrainingSummaryResponse:
        """Totals and per-run summaries for the last `days` days."""
        runs = await self._recent_runs(days)

        stats = TrainingStats(
            total_distance=total_distance_km(runs),
            total_runs=len(runs),
            avg_pace=average_pace(runs),
            total_time=total_moving_minutes(runs),
        )

        return TrainingSummaryResponse(
            period=Period(start=(self.now - timedelta(days=days)).date(), end=self.now.date()),
            stats=stats,
            runs=[activity_to_summary(r) for r in runs],
            text=(
                f"Training summary for last {days} days: {stats.total_runs} runs, "
                f"{stats.total_distance}km total, {stats.avg_pace}/km average pace."
            ),
        )

    async def compare_training_weeks(
        self,
        current_week_start: Optional[date] = None,
    ) -> WeekComparisonResponse:
        """This week against the previous one."""
        bounds = week_bounds(self.now, current_week_start)

        # History must reach back to the start of the previous week
        days_needed = (self.now - bounds.previous_start).days + 1
        records = await self._fetch_runs(max(days_needed, settings.activity_fetch_days))

        previous_runs, current_runs = split_weeks(records, bounds)
        previous = aggregate_runs(previous_runs)
        current = aggregate_runs(current_runs)
        changes = compare_aggregates(previous, current)

        return WeekComparisonResponse(
            current_week_start=bounds.current_start.date(),
            previous_week_start=bounds.previous_start.date(),
            current_week=current,
            previous_week=previous,
            changes=changes,
            text=(
                f"Week comparison: Distance {format_signed(changes.distance_delta_percent, '%')}, "
                f"Runs {format_signed(changes.runs_delta)}, "
                f"Pace {format_signed(changes.pace_delta_seconds, 's/km')}. "
                f"Trend: {changes.trend.value}"
            ),
        )

    async def coaching_advice(self, context: Optional[str] = None) -> CoachingAdviceResponse:
        """Short-term load and training state to base advice on."""
        records = await self._fetch_runs(ACUTE_WINDOW_DAYS)
        load = recent_load(records, self.now)

        return CoachingAdviceResponse(
            recent_load=load,
            context=context,
            text=(
                f"Training load: {load.last_7_days_km}km in 7 days, "
                f"{load.last_3_days_km}km in last 3 days. "
                f"{load.consecutive_days} consecutive days. "
                f"State: {load.training_state.value}"
            ),
        )

    async def training_load(self) -> TrainingLoadResponse:
        """Acute and chronic load with the injury-risk band."""
        records = await self._fetch_runs(CHRONIC_WINDOW_DAYS)
        report = assess_training_load(records, self.now)
        assessment = report.assessment

        return TrainingLoadResponse(
            acute=report.acute,
            chronic=report.chronic,
            assessment=assessment,
            text=(
                f"Acute load {round_to_tenth(assessment.acute_load)}, "
                f"chronic load {round_to_tenth(assessment.chronic_load)}, "
                f"ratio {assessment.ratio:.2f} ({assessment.risk_band.value}). "
                f"Load score {assessment.load_score}/100."
            ),
        )

    async def elevation_trends(self, days: int = 30, top_n: int = 5) -> ElevationTrendsResponse:
        """Flat-equivalent paces of the hilliest recent runs."""
        runs = await self._recent_runs(days)
        summary = summarize_elevation(runs)
        hilly = top_hilly_runs(runs, top_n)

        return ElevationTrendsResponse(
            summary=summary,
            runs=hilly,
            text=(
                f"Elevation analysis of {summary.total_activities} runs: "
                f"{summary.average_elevation_gain}m average gain, "
                f"{summary.average_pace_adjustment}s/km average pace adjustment."
            ),
        )

    async def pace_patterns(
        self,
        group_by: PaceGrouping = PaceGrouping.RUN_TYPE,
        days: int = 30,
    ) -> PacePatternsResponse:
        """Pace spread per run type or distance range."""
        grouping = PaceGrouping(group_by)
        runs = await self._recent_runs(days)
        pace_groups = group_paces(runs, GROUP_KEYS[grouping.value])

        return PacePatternsResponse(
            group_by=grouping,
            total_runs=len(runs),
            groups=pace_groups,
            text=(
                f"Pace patterns of {len(runs)} runs in {len(pace_groups)} groups: "
                + ", ".join(
                    f"{g.group} {g.statistics.mean}/km ({g.count})" for g in pace_groups
                )
            ),
        )

    async def run_progression(self, route: str, days: int = 90) -> RunProgressionResponse:
        """Pace over time on one named route."""
        runs = await self._recent_runs(days)
        matched = [r for r in runs if matches_route(r, route)]
        entries = build_progression(matched)
        summary = summarize_progression(matched)

        if summary is None:
            text = f"No runs matching '{route}' in the last {days} days."
        else:
            text = (
                f"{summary.total_runs} runs of '{route}': best {summary.best_pace}/km, "
                f"average {summary.average_pace}/km, "
                f"{format_signed(summary.improvement_seconds, 's/km')} since the first run "
                f"({summary.trend.value})."
            )

        return RunProgressionResponse(
            route=route,
            progression=entries,
            summary=summary,
            text=text,
        )

    async def compare_runs(self, first_id: int, second_id: int) -> RunComparisonResponse:
        """
        Compare two runs by id.

        Raises:
            ActivityNotFoundError: If either activity does not exist
        """
        baseline = await self.client.get_activity(first_id)
        current = await self.client.get_activity(second_id)
        result = compare_runs(baseline, current)
        comparison = result.comparison

        return RunComparisonResponse(
            result=result,
            text=(
                f"'{current.name}' vs '{baseline.name}': "
                f"distance {format_signed(comparison.distance_delta_percent, '%')}, "
                f"pace {format_signed(round_half_up(comparison.pace_delta_seconds), 's/km')}. "
                f"Trend: {comparison.trend.value}"
            ),
        )

    async def export_route(
        self,
        request: RouteExportRequest,
        uploader: StravaUploader,
    ) -> RouteExportResponse:
        """
        Upload a planned route to Strava as a GPX activity.

        Raises:
            ValueError: If the generated GPX fails the structural check
            StravaUploadError: If Strava rejects or does not finish the upload
        """
        track_points = route_to_track_points(request)
        gpx = generate_gpx(
            track_points,
            GPXMetadata(name=request.name, description=request.description),
        )
        if not validate_gpx(gpx):
            raise ValueError("Generated GPX file is invalid")

        path = [(p.lat, p.lng) for p in request.path]
        distance = round_to_tenth(path_distance_km(path))
        gain, _ = calculate_elevation_changes(
            [p.elevation for p in request.elevation_profile], smoothing_window=1
        )

        activity_name = request.activity_name or request.name
        upload = await uploader.upload_gpx(gpx, activity_name, request.description)
        status = await uploader.wait_for_upload(upload.id)
        url = uploader.activity_url(status.activity_id)

        logger.info(f"Exported route '{request.name}' as activity {status.activity_id}")

        return RouteExportResponse(
            strava_activity_id=status.activity_id,
            strava_url=url,
            route_name=activity_name,
            distance=distance,
            elevation_gain=round_half_up(gain),
            polyline=encode_polyline(path),
            text=f"Route '{activity_name}' ({distance}km) exported to Strava: {url}",
        )
