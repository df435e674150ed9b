"""
Activity records and aggregation.

Usage:
    from strava_coach.features.activities import ActivityRecord, average_pace

Components:
- ActivityRecord: frozen Strava activity
- ActivitySummary: per-run display unit
- Aggregation helpers: filtering by date, totals, average pace
"""

from .schemas import ActivityRecord, ActivityMap, ActivitySummary, Split
from .summary import (
    activity_to_summary,
    average_pace,
    filter_by_date_range,
    records_in_last_days,
    runs_only,
    sort_by_date,
    total_distance_km,
    total_moving_minutes,
)

__all__ = [
    # Schemas
    "ActivityRecord",
    "ActivityMap",
    "ActivitySummary",
    "Split",
    # Helpers
    "activity_to_summary",
    "average_pace",
    "filter_by_date_range",
    "records_in_last_days",
    "runs_only",
    "sort_by_date",
    "total_distance_km",
    "total_moving_minutes",
]
