"""
Run Progression Engine.

Follows the pace of repeated runs on one route over time. Runs are
matched to a route by name, which is how athletes usually label their
regular loops on Strava.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from strava_coach.features.activities.schemas import ActivityRecord
from strava_coach.features.activities.summary import average_pace
from strava_coach.shared.formatters import pace_from_speed, seconds_to_pace
from strava_coach.shared.formulas import round_half_up, round_to_tenth, safe_ratio

from .comparison import Trend, classify_trend


@dataclass(frozen=True)
class ProgressionEntry:
    id: int
    name: str
    date: str
    distance: float
    duration: int
    elevation: int
    pace: str
    pace_seconds: float


@dataclass(frozen=True)
class DateRange:
    first: str
    last: str


@dataclass(frozen=True)
class ProgressionSummary:
    total_runs: int
    date_range: DateRange
    best_pace: str
    worst_pace: str
    average_pace: str
    improvement_seconds: float  # last - first; negative = faster now
    improvement: float  # percent faster than the first run
    trend: Trend


def matches_route(record: ActivityRecord, route: str) -> bool:
    """Case-insensitive match of a route label within the activity name."""
    return route.strip().lower() in record.name.lower()


def build_progression(records: Sequence[ActivityRecord]) -> List[ProgressionEntry]:
    """Chronological entries for runs with a defined pace."""
    ordered = sorted(
        (r for r in records if r.has_pace),
        key=lambda r: r.start_date_local,
    )
    return [
        ProgressionEntry(
            id=r.id,
            name=r.name,
            date=r.local_date.isoformat(),
            distance=round_to_tenth(r.distance_km),
            duration=round_half_up(r.moving_time / 60),
            elevation=round_half_up(r.total_elevation_gain),
            pace=pace_from_speed(r.average_speed),
            pace_seconds=r.pace_seconds,
        )
        for r in ordered
    ]


def summarize_progression(records: Sequence[ActivityRecord]) -> Optional[ProgressionSummary]:
    """
    Best, worst and average pace plus first-to-last improvement.

    Runs without a pace are skipped. The average is total distance over
    total moving time, so a short slow run weighs less than a long one.
    Returns None when no run has a pace. The trend uses the same rule as
    run comparisons, with pace change only (distance is the route's).
    """
    runs = [r for r in records if r.has_pace]
    entries = build_progression(runs)
    if not entries:
        return None

    paces = [e.pace_seconds for e in entries]
    first, last = entries[0], entries[-1]
    change = last.pace_seconds - first.pace_seconds

    return ProgressionSummary(
        total_runs=len(entries),
        date_range=DateRange(first=first.date, last=last.date),
        best_pace=seconds_to_pace(min(paces)),
        worst_pace=seconds_to_pace(max(paces)),
        average_pace=average_pace(runs),
        improvement_seconds=round_to_tenth(change),
        improvement=round_to_tenth(safe_ratio(-change, first.pace_seconds) * 100),
        trend=classify_trend(change, 0),
    )
