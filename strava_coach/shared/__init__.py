"""
Shared utilities (NOT business logic).

Usage:
    from strava_coach.shared import pace_from_speed, round_half_up
    from strava_coach.shared.constants import SECONDS_PER_100M_ELEVATION
"""
from .formulas import (
    round_half_up,
    round_to_tenth,
    safe_ratio,
)
from .formatters import (
    NO_PACE,
    pace_from_speed,
    pace_seconds_from_speed,
    pace_to_seconds,
    seconds_to_pace,
    format_distance_km,
    format_elevation,
    format_signed,
)
from .geo import (
    haversine,
    path_distance_km,
    is_loop,
    EARTH_RADIUS_KM,
)
from .elevation import (
    smooth_elevations,
    calculate_elevation_changes,
)
from .constants import (
    StravaActivityType,
    StravaWorkoutType,
    RunType,
    ANALYZED_ACTIVITY_TYPES,
)

__all__ = [
    # formulas
    "round_half_up",
    "round_to_tenth",
    "safe_ratio",
    # formatters
    "NO_PACE",
    "pace_from_speed",
    "pace_seconds_from_speed",
    "pace_to_seconds",
    "seconds_to_pace",
    "format_distance_km",
    "format_elevation",
    "format_signed",
    # geo
    "haversine",
    "path_distance_km",
    "is_loop",
    "EARTH_RADIUS_KM",
    # elevation
    "smooth_elevations",
    "calculate_elevation_changes",
    # constants
    "StravaActivityType",
    "StravaWorkoutType",
    "RunType",
    "ANALYZED_ACTIVITY_TYPES",
]
