"""
Unified constants for activity types and coaching thresholds.

The coaching thresholds are product heuristics, not physiology: they are
kept here as named values so they can be tuned in one place.
"""

from enum import Enum


class StravaActivityType(str, Enum):
    """Strava activity types the coach analyses; everything else is dropped."""
    RUN = "Run"


# Activity types kept after fetching
ANALYZED_ACTIVITY_TYPES: list[str] = [StravaActivityType.RUN.value]


class StravaWorkoutType(int, Enum):
    """Strava `workout_type` values for runs."""
    DEFAULT = 0
    RACE = 1
    LONG_RUN = 2
    WORKOUT = 3


class RunType(str, Enum):
    """Run categories used for pace distribution grouping."""
    EASY = "easy"
    RACE = "race"
    LONG_RUN = "long_run"
    WORKOUT = "workout"


WORKOUT_TYPE_TO_RUN_TYPE: dict[int, RunType] = {
    StravaWorkoutType.DEFAULT.value: RunType.EASY,
    StravaWorkoutType.RACE.value: RunType.RACE,
    StravaWorkoutType.LONG_RUN.value: RunType.LONG_RUN,
    StravaWorkoutType.WORKOUT.value: RunType.WORKOUT,
}


# =============================================================================
# Training load
# =============================================================================

ACUTE_WINDOW_DAYS = 7
CHRONIC_WINDOW_DAYS = 28

# Acute:chronic ratio bands
HIGH_RISK_RATIO = 1.5
OPTIMAL_RATIO_MIN = 0.8
OPTIMAL_RATIO_MAX = 1.3

# Display score: acute load * 2, capped
LOAD_SCORE_MULTIPLIER = 2
LOAD_SCORE_MAX = 100


# =============================================================================
# Training state (coaching advice)
# =============================================================================

FATIGUE_CONSECUTIVE_DAYS = 4
FATIGUE_LAST_3_DAYS_KM = 30.0
BUILDING_LAST_7_DAYS_KM = 40.0
RECOVERING_LAST_3_DAYS_KM = 10.0
RECOVERING_LAST_7_DAYS_KM = 20.0
SHORT_WINDOW_DAYS = 3


# =============================================================================
# Trend classification (week and run comparisons)
# =============================================================================

PACE_TREND_THRESHOLD_SECONDS = 10
PACE_TOLERANCE_SECONDS = 5
VOLUME_TREND_THRESHOLD_PERCENT = 15


# =============================================================================
# Elevation
# =============================================================================

# Coaching heuristic: every 100 m of climbing costs ~12 s over the run,
# spread per kilometre
SECONDS_PER_100M_ELEVATION = 12
TOP_HILLY_RUNS = 5


# =============================================================================
# Pace distribution
# =============================================================================

EXAMPLE_RUNS_PER_GROUP = 3

# Upper bounds (km, exclusive) of distance buckets; last bucket is open
DISTANCE_BUCKETS: list[tuple[float, str]] = [
    (5.0, "0-5km"),
    (10.0, "5-10km"),
    (15.0, "10-15km"),
    (21.1, "15-21km"),
]
LONGEST_DISTANCE_BUCKET = "21km+"
