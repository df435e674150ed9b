"""
Elevation Adjustment Engine.

Estimates the flat-terrain equivalent of a hilly run's pace:

    adjustment (s/km) = (elevation_gain_m / 100) * 12 / distance_km
    adjusted pace     = actual pace - adjustment

The 12 s per 100 m constant is a coaching rule of thumb, not a
physiological model. Unlike the gradient-based GAP calculators it only
needs the run's total climb, which Strava reports for every activity.
"""

from dataclasses import dataclass
from typing import List, Sequence

from strava_coach.features.activities.schemas import ActivityRecord
from strava_coach.shared.constants import SECONDS_PER_100M_ELEVATION, TOP_HILLY_RUNS
from strava_coach.shared.formatters import seconds_to_pace
from strava_coach.shared.formulas import round_half_up, round_to_tenth, safe_ratio


ADJUSTMENT_METHOD = (
    f"Flat-equivalent pace: {SECONDS_PER_100M_ELEVATION}s/km faster per 100m "
    "of elevation gain, spread over the run distance"
)


@dataclass(frozen=True)
class ElevationAdjustment:
    """Actual vs flat-equivalent pace for one run."""
    id: int
    name: str
    date: str
    distance: float  # km, one decimal
    elevation_gain: float
    elevation_per_km: int
    actual_pace: str
    adjusted_pace: str
    actual_pace_seconds: float
    adjusted_pace_seconds: float
    pace_adjustment_seconds: float


@dataclass(frozen=True)
class ElevationSummary:
    """Elevation impact across a set of runs."""
    total_activities: int
    average_elevation_gain: int
    average_pace_adjustment: float
    adjustment_method: str


def pace_adjustment_seconds(elevation_gain_m: float, distance_km: float) -> float:
    """
    Seconds per km attributable to climbing.

    Example: 200 m over 10 km -> (200 / 100) * 12 / 10 = 2.4 s/km.
    Zero distance gives 0.
    """
    if distance_km <= 0:
        return 0.0
    return (elevation_gain_m / 100) * SECONDS_PER_100M_ELEVATION / distance_km


def elevation_per_km(elevation_gain_m: float, distance_km: float) -> int:
    """Metres climbed per km, rounded; 0 for zero distance."""
    return round_half_up(safe_ratio(elevation_gain_m, distance_km))


def adjust_for_elevation(record: ActivityRecord) -> ElevationAdjustment:
    """
    Flat-equivalent pace of one run.

    A run without a defined pace keeps 0 for both paces; its adjustment
    is still reported so the climb is visible.
    """
    distance_km = record.distance_km
    adjustment = pace_adjustment_seconds(record.total_elevation_gain, distance_km)

    actual = record.pace_seconds
    adjusted = actual - adjustment if actual > 0 else 0.0

    return ElevationAdjustment(
        id=record.id,
        name=record.name,
        date=record.local_date.isoformat(),
        distance=round_to_tenth(distance_km),
        elevation_gain=record.total_elevation_gain,
        elevation_per_km=elevation_per_km(record.total_elevation_gain, distance_km),
        actual_pace=seconds_to_pace(actual),
        adjusted_pace=seconds_to_pace(adjusted),
        actual_pace_seconds=actual,
        adjusted_pace_seconds=adjusted,
        pace_adjustment_seconds=adjustment,
    )


def summarize_elevation(records: Sequence[ActivityRecord]) -> ElevationSummary:
    """Average climb and average pace adjustment over the runs."""
    count = len(records)
    adjustments = [
        pace_adjustment_seconds(r.total_elevation_gain, r.distance_km)
        for r in records
    ]

    return ElevationSummary(
        total_activities=count,
        average_elevation_gain=round_half_up(
            safe_ratio(sum(r.total_elevation_gain for r in records), count)
        ),
        average_pace_adjustment=round_to_tenth(safe_ratio(sum(adjustments), count)),
        adjustment_method=ADJUSTMENT_METHOD,
    )


def top_hilly_runs(
    records: Sequence[ActivityRecord],
    n: int = TOP_HILLY_RUNS,
) -> List[ElevationAdjustment]:
    """The `n` runs with the most climbing, highest first."""
    ranked = sorted(records, key=lambda r: r.total_elevation_gain, reverse=True)
    return [adjust_for_elevation(r) for r in ranked[:max(n, 0)]]
