"""
Coaching tools.

Usage:
    from strava_coach.features.coach import CoachService

    service = CoachService(client, cache, user_id)
    summary = await service.training_summary(days=7)
"""

from .schemas import (
    PaceGrouping,
    TrainingSummaryRequest,
    CompareWeeksRequest,
    CoachingAdviceRequest,
    ElevationTrendsRequest,
    PacePatternsRequest,
    RunProgressionRequest,
    CompareRunsRequest,
    RoutePoint,
    ElevationPoint,
    RouteExportRequest,
    TrainingSummaryResponse,
    WeekComparisonResponse,
    CoachingAdviceResponse,
    TrainingLoadResponse,
    ElevationTrendsResponse,
    PacePatternsResponse,
    RunProgressionResponse,
    RunComparisonResponse,
    RouteExportResponse,
)
from .service import CoachService, route_to_track_points

__all__ = [
    "CoachService",
    "route_to_track_points",
    "PaceGrouping",
    "TrainingSummaryRequest",
    "CompareWeeksRequest",
    "CoachingAdviceRequest",
    "ElevationTrendsRequest",
    "PacePatternsRequest",
    "RunProgressionRequest",
    "CompareRunsRequest",
    "RoutePoint",
    "ElevationPoint",
    "RouteExportRequest",
    "TrainingSummaryResponse",
    "WeekComparisonResponse",
    "CoachingAdviceResponse",
    "TrainingLoadResponse",
    "ElevationTrendsResponse",
    "PacePatternsResponse",
    "RunProgressionResponse",
    "RunComparisonResponse",
    "RouteExportResponse",
]
