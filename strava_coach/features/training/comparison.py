"""
Week/Run Comparison Engine.

Compares a baseline aggregate (previous week, older run) with a current
one and classifies the trend.

The trend rule mixes pace and volume on purpose: a pace change of more
than 10 s/km decides on its own, while a volume change only counts when
it is large (over 15%) and pace did not move the other way.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional, Sequence

from strava_coach.features.activities.schemas import ActivityRecord
from strava_coach.features.activities.summary import (
    average_pace,
    filter_by_date_range,
    total_distance_km,
)
from strava_coach.shared.constants import (
    PACE_TREND_THRESHOLD_SECONDS,
    PACE_TOLERANCE_SECONDS,
    VOLUME_TREND_THRESHOLD_PERCENT,
)
from strava_coach.shared.formatters import pace_from_speed, pace_to_seconds
from strava_coach.shared.formulas import round_half_up, round_to_tenth


class Trend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


@dataclass(frozen=True)
class TrainingAggregate:
    """Totals for a set of runs (typically one week)."""
    total_distance_km: float
    run_count: int
    avg_pace: str
    avg_pace_seconds: int


@dataclass(frozen=True)
class ComparisonResult:
    """Change from a baseline aggregate to the current one."""
    distance_delta_percent: float
    pace_delta_seconds: float  # negative = faster
    runs_delta: int
    trend: Trend


@dataclass(frozen=True)
class RunSnapshot:
    """The fields of one run that take part in a run comparison."""
    id: int
    name: str
    date: str
    distance_km: float
    pace: str
    pace_seconds: float
    duration_minutes: int
    elevation_gain: float
    average_heartrate: Optional[float] = None


@dataclass(frozen=True)
class RunComparison:
    """Two runs side by side with their deltas."""
    baseline: RunSnapshot
    current: RunSnapshot
    comparison: ComparisonResult
    elevation_delta: float
    duration_delta_minutes: int
    heartrate_delta: Optional[float] = None


@dataclass(frozen=True)
class WeekBounds:
    """[start, end) datetimes of the current and previous weeks."""
    current_start: datetime
    current_end: datetime
    previous_start: datetime
    previous_end: datetime


# =============================================================================
# Trend
# =============================================================================

def classify_trend(pace_delta: float, distance_delta_percent: float) -> Trend:
    """
    Classify a change; improving is checked before declining.

    improving: pace_delta < -10, or distance% > 15 with pace_delta < 5
    declining: pace_delta > 10, or distance% < -15 with pace_delta > -5
    """
    if pace_delta < -PACE_TREND_THRESHOLD_SECONDS or (
        distance_delta_percent > VOLUME_TREND_THRESHOLD_PERCENT
        and pace_delta < PACE_TOLERANCE_SECONDS
    ):
        return Trend.IMPROVING
    if pace_delta > PACE_TREND_THRESHOLD_SECONDS or (
        distance_delta_percent < -VOLUME_TREND_THRESHOLD_PERCENT
        and pace_delta > -PACE_TOLERANCE_SECONDS
    ):
        return Trend.DECLINING
    return Trend.STABLE


# =============================================================================
# Aggregates
# =============================================================================

def aggregate_runs(records: Sequence[ActivityRecord]) -> TrainingAggregate:
    """Total distance, run count and distance-weighted average pace."""
    pace = average_pace(records)
    return TrainingAggregate(
        total_distance_km=total_distance_km(records),
        run_count=len(records),
        avg_pace=pace,
        avg_pace_seconds=pace_to_seconds(pace),
    )


def compare_aggregates(
    baseline: TrainingAggregate,
    current: TrainingAggregate,
) -> ComparisonResult:
    """
    Deltas from baseline to current.

    Distance change is a whole percentage (0 when the baseline had no
    distance). Pace change is the plain difference of average pace
    seconds; a week without runs counts as 0 s/km.
    """
    if baseline.total_distance_km > 0:
        distance_delta = round_half_up(
            (current.total_distance_km - baseline.total_distance_km)
            / baseline.total_distance_km * 100
        )
    else:
        distance_delta = 0

    pace_delta = current.avg_pace_seconds - baseline.avg_pace_seconds

    return ComparisonResult(
        distance_delta_percent=distance_delta,
        pace_delta_seconds=pace_delta,
        runs_delta=current.run_count - baseline.run_count,
        trend=classify_trend(pace_delta, distance_delta),
    )


def week_bounds(as_of: datetime, current_week_start: Optional[date] = None) -> WeekBounds:
    """
    Current and previous week boundaries.

    The current week starts at midnight of `current_week_start`, or of the
    Sunday on or before `as_of` when not given.
    """
    if current_week_start is None:
        days_since_sunday = (as_of.weekday() + 1) % 7
        current_week_start = as_of.date() - timedelta(days=days_since_sunday)

    current_start = datetime.combine(current_week_start, datetime.min.time())
    current_end = current_start + timedelta(days=7)
    previous_start = current_start - timedelta(days=7)

    return WeekBounds(
        current_start=current_start,
        current_end=current_end,
        previous_start=previous_start,
        previous_end=current_start,
    )


def split_weeks(
    records: Sequence[ActivityRecord],
    bounds: WeekBounds,
) -> tuple[list[ActivityRecord], list[ActivityRecord]]:
    """
    Runs of the previous and current weeks.

    Ranges are inclusive on both ends, so a run starting exactly at
    midnight of the current week's first day belongs to both weeks.
    """
    previous = filter_by_date_range(records, bounds.previous_start, bounds.previous_end)
    current = filter_by_date_range(records, bounds.current_start, bounds.current_end)
    return previous, current


# =============================================================================
# Single runs
# =============================================================================

def snapshot(record: ActivityRecord) -> RunSnapshot:
    return RunSnapshot(
        id=record.id,
        name=record.name,
        date=record.local_date.isoformat(),
        distance_km=round_to_tenth(record.distance_km),
        pace=pace_from_speed(record.average_speed),
        pace_seconds=record.pace_seconds,
        duration_minutes=round_half_up(record.moving_time / 60),
        elevation_gain=record.total_elevation_gain,
        average_heartrate=record.average_heartrate,
    )


def compare_runs(baseline: ActivityRecord, current: ActivityRecord) -> RunComparison:
    """
    Compare two individual runs with the same trend rule as weeks.

    Pace delta uses the exact per-km pace of each run; distance change is
    a percentage with one decimal.
    """
    before = snapshot(baseline)
    after = snapshot(current)

    if baseline.distance > 0:
        distance_delta = round_to_tenth(
            (current.distance - baseline.distance) / baseline.distance * 100
        )
    else:
        distance_delta = 0.0

    pace_delta = after.pace_seconds - before.pace_seconds

    heartrate_delta = None
    if baseline.average_heartrate is not None and current.average_heartrate is not None:
        heartrate_delta = round_to_tenth(current.average_heartrate - baseline.average_heartrate)

    return RunComparison(
        baseline=before,
        current=after,
        comparison=ComparisonResult(
            distance_delta_percent=distance_delta,
            pace_delta_seconds=pace_delta,
            runs_delta=0,
            trend=classify_trend(pace_delta, distance_delta),
        ),
        elevation_delta=current.total_elevation_gain - baseline.total_elevation_gain,
        duration_delta_minutes=after.duration_minutes - before.duration_minutes,
        heartrate_delta=heartrate_delta,
    )
