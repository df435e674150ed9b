"""
Coach tool schemas.

Pydantic models for tool requests and responses. Every response carries
a one-line `text` summary for the chat host next to the structured data.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from strava_coach.features.activities.schemas import ActivitySummary
from strava_coach.features.training import (
    ComparisonResult,
    ElevationAdjustment,
    ElevationSummary,
    LoadAssessment,
    LoadWindow,
    PaceGroup,
    ProgressionEntry,
    ProgressionSummary,
    RecentLoad,
    RunComparison,
    TrainingAggregate,
)


class PaceGrouping(str, Enum):
    """How pace patterns are grouped."""
    RUN_TYPE = "runType"
    DISTANCE_RANGE = "distanceRange"


# === Request Models ===

class TrainingSummaryRequest(BaseModel):
    """Request for a training summary."""
    days: int = Field(default=7, ge=1, le=365, description="Number of days to analyze")


class CompareWeeksRequest(BaseModel):
    """Request for a week-over-week comparison."""
    current_week_start: Optional[date] = Field(
        default=None,
        description="First day of the current week; defaults to the last Sunday"
    )


class CoachingAdviceRequest(BaseModel):
    """Request for coaching advice."""
    context: Optional[str] = Field(
        default=None,
        description='Free-form hint such as "recovery" or "intensity"'
    )


class ElevationTrendsRequest(BaseModel):
    days: int = Field(default=30, ge=1, le=365)
    top_n: int = Field(default=5, ge=1, le=50)


class PacePatternsRequest(BaseModel):
    group_by: PaceGrouping = PaceGrouping.RUN_TYPE
    days: int = Field(default=30, ge=1, le=365)


class RunProgressionRequest(BaseModel):
    route: str = Field(..., min_length=1, description="Route label matched against run names")
    days: int = Field(default=90, ge=1, le=365)


class CompareRunsRequest(BaseModel):
    first_id: int = Field(..., description="Baseline (older) activity")
    second_id: int = Field(..., description="Activity compared against the baseline")


class RoutePoint(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class ElevationPoint(BaseModel):
    """Elevation sample along a planned route."""
    distance: float = Field(..., ge=0, description="km from start")
    elevation: float = Field(..., description="meters")


class RouteExportRequest(BaseModel):
    """Planned route to upload to Strava."""
    name: str = Field(..., min_length=1)
    activity_name: Optional[str] = Field(
        default=None,
        description="Name of the Strava activity; defaults to the route name"
    )
    description: Optional[str] = None
    path: List[RoutePoint] = Field(..., min_length=2)
    elevation_profile: List[ElevationPoint] = Field(default_factory=list)


# === Response Models ===

class Period(BaseModel):
    start: date
    end: date


class TrainingStats(BaseModel):
    total_distance: float = Field(..., description="km, one decimal")
    total_runs: int
    avg_pace: str
    total_time: int = Field(..., description="Moving time, minutes")


class TrainingSummaryResponse(BaseModel):
    period: Period
    stats: TrainingStats
    runs: List[ActivitySummary]
    text: str


class WeekComparisonResponse(BaseModel):
    current_week_start: date
    previous_week_start: date
    current_week: TrainingAggregate
    previous_week: TrainingAggregate
    changes: ComparisonResult
    text: str


class CoachingAdviceResponse(BaseModel):
    recent_load: RecentLoad
    context: Optional[str] = None
    text: str


class TrainingLoadResponse(BaseModel):
    acute: LoadWindow
    chronic: LoadWindow
    assessment: LoadAssessment
    text: str


class ElevationTrendsResponse(BaseModel):
    summary: ElevationSummary
    runs: List[ElevationAdjustment]
    text: str


class PacePatternsResponse(BaseModel):
    group_by: PaceGrouping
    total_runs: int
    groups: List[PaceGroup]
    text: str


class RunProgressionResponse(BaseModel):
    route: str
    progression: List[ProgressionEntry]
    summary: Optional[ProgressionSummary] = None
    text: str


class RunComparisonResponse(BaseModel):
    result: RunComparison
    text: str


class RouteExportResponse(BaseModel):
    success: bool = True
    strava_activity_id: int
    strava_url: str
    route_name: str
    distance: float = Field(..., description="km, one decimal")
    elevation_gain: int = Field(..., description="meters")
    polyline: str
    text: str
