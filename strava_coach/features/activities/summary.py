"""
Activity aggregation helpers.

Pure functions over ActivityRecord sequences: filtering, totals and the
per-run display summary.
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Sequence

from strava_coach.shared.constants import ANALYZED_ACTIVITY_TYPES
from strava_coach.shared.formatters import NO_PACE, pace_from_speed
from strava_coach.shared.formulas import round_half_up, round_to_tenth

from .schemas import ActivityRecord, ActivitySummary


def runs_only(records: Iterable[ActivityRecord]) -> List[ActivityRecord]:
    """Keep only activity types the coach analyses."""
    return [r for r in records if r.type in ANALYZED_ACTIVITY_TYPES]


def activity_to_summary(record: ActivityRecord) -> ActivitySummary:
    """Convert a record to its display summary."""
    return ActivitySummary(
        date=record.local_date.isoformat(),
        distance=round_to_tenth(record.distance / 1000),
        pace=pace_from_speed(record.average_speed),
        duration=round_half_up(record.moving_time / 60),
    )


def average_pace(records: Sequence[ActivityRecord]) -> str:
    """
    Average pace across runs, weighted by distance.

    Computed as total distance over total moving time rather than the mean
    of individual paces, which would over-weight short slow runs.
    """
    if not records:
        return NO_PACE

    total_distance = sum(r.distance for r in records)
    total_time = sum(r.moving_time for r in records)

    if total_distance <= 0 or total_time <= 0:
        return NO_PACE

    return pace_from_speed(total_distance / total_time)


def total_distance_km(records: Iterable[ActivityRecord]) -> float:
    """Summed distance in km, one decimal."""
    return round_to_tenth(sum(r.distance for r in records) / 1000)


def total_moving_minutes(records: Iterable[ActivityRecord]) -> int:
    return round_half_up(sum(r.moving_time for r in records) / 60)


def filter_by_date_range(
    records: Iterable[ActivityRecord],
    start: datetime,
    end: datetime,
) -> List[ActivityRecord]:
    """
    Records whose local start time lies in [start, end].

    Both bounds are naive local datetimes.
    """
    return [r for r in records if start <= r.start_date_local <= end]


def records_in_last_days(
    records: Iterable[ActivityRecord],
    as_of: datetime,
    days: int,
) -> List[ActivityRecord]:
    """Records started within `days` days before `as_of` (inclusive)."""
    return filter_by_date_range(records, as_of - timedelta(days=days), as_of)


def sort_by_date(
    records: Iterable[ActivityRecord],
    newest_first: bool = False,
) -> List[ActivityRecord]:
    return sorted(records, key=lambda r: r.start_date_local, reverse=newest_first)
