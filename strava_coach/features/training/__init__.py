"""
Training metrics.

Usage:
    from strava_coach.features.training import assess_load, classify_trend
    from strava_coach.features.training.elevation import top_hilly_runs

Components:
- load: acute/chronic load, risk band, streaks, training state
- comparison: week and run deltas, trend classification
- elevation: flat-equivalent pace
- distribution: pace statistics per group
- progression: pace over repeated runs of a route

Every function here is pure: no I/O, no caching, no logging.
"""

from .load import (
    LoadWindow,
    LoadAssessment,
    TrainingLoadReport,
    RecentLoad,
    RiskBand,
    TrainingState,
    window_load,
    classify_risk,
    load_score,
    assess_load,
    assess_training_load,
    consecutive_days,
    classify_training_state,
    recent_load,
)
from .comparison import (
    Trend,
    TrainingAggregate,
    ComparisonResult,
    RunSnapshot,
    RunComparison,
    WeekBounds,
    classify_trend,
    aggregate_runs,
    compare_aggregates,
    compare_runs,
    week_bounds,
    split_weeks,
)
from .elevation import (
    ElevationAdjustment,
    ElevationSummary,
    pace_adjustment_seconds,
    elevation_per_km,
    adjust_for_elevation,
    summarize_elevation,
    top_hilly_runs,
)
from .distribution import (
    PaceStatistics,
    PaceGroup,
    ExampleRun,
    GROUP_KEYS,
    pace_statistics,
    distance_bucket,
    run_type,
    group_paces,
)
from .progression import (
    ProgressionEntry,
    ProgressionSummary,
    matches_route,
    build_progression,
    summarize_progression,
)

__all__ = [
    # load
    "LoadWindow",
    "LoadAssessment",
    "TrainingLoadReport",
    "RecentLoad",
    "RiskBand",
    "TrainingState",
    "window_load",
    "classify_risk",
    "load_score",
    "assess_load",
    "assess_training_load",
    "consecutive_days",
    "classify_training_state",
    "recent_load",
    # comparison
    "Trend",
    "TrainingAggregate",
    "ComparisonResult",
    "RunSnapshot",
    "RunComparison",
    "WeekBounds",
    "classify_trend",
    "aggregate_runs",
    "compare_aggregates",
    "compare_runs",
    "week_bounds",
    "split_weeks",
    # elevation
    "ElevationAdjustment",
    "ElevationSummary",
    "pace_adjustment_seconds",
    "elevation_per_km",
    "adjust_for_elevation",
    "summarize_elevation",
    "top_hilly_runs",
    # distribution
    "PaceStatistics",
    "PaceGroup",
    "ExampleRun",
    "GROUP_KEYS",
    "pace_statistics",
    "distance_bucket",
    "run_type",
    "group_paces",
    # progression
    "ProgressionEntry",
    "ProgressionSummary",
    "matches_route",
    "build_progression",
    "summarize_progression",
]
