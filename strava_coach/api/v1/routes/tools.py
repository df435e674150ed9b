"""
Coach tool routes.

One POST endpoint per coaching tool. All of them need the athlete's
Strava token in the Authorization header.
"""

import logging
from contextlib import contextmanager

from fastapi import APIRouter, Depends, HTTPException

from strava_coach.api.deps import get_coach_service, get_strava_client
from strava_coach.features.coach import (
    CoachService,
    CoachingAdviceRequest,
    CoachingAdviceResponse,
    CompareRunsRequest,
    CompareWeeksRequest,
    ElevationTrendsRequest,
    ElevationTrendsResponse,
    PacePatternsRequest,
    PacePatternsResponse,
    RouteExportRequest,
    RouteExportResponse,
    RunComparisonResponse,
    RunProgressionRequest,
    RunProgressionResponse,
    TrainingLoadResponse,
    TrainingSummaryRequest,
    TrainingSummaryResponse,
    WeekComparisonResponse,
)
from strava_coach.features.strava import (
    ActivityNotFoundError,
    StravaAuthError,
    StravaClient,
    StravaError,
    StravaRateLimitError,
    StravaUploader,
    StravaUploadError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@contextmanager
def strava_errors():
    """Translate Strava and validation errors into HTTP errors."""
    try:
        yield
    except StravaAuthError:
        raise HTTPException(status_code=401, detail="Strava token is invalid or expired")
    except StravaRateLimitError as e:
        headers = {"Retry-After": str(e.retry_after)} if e.retry_after is not None else None
        raise HTTPException(
            status_code=429,
            detail="Strava API rate limit exceeded",
            headers=headers,
        )
    except ActivityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StravaUploadError as e:
        logger.error(f"Strava upload failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except StravaError as e:
        logger.error(f"Strava request failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch Strava data")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/training-summary", response_model=TrainingSummaryResponse)
async def training_summary(
    request: TrainingSummaryRequest = TrainingSummaryRequest(),
    service: CoachService = Depends(get_coach_service),
):
    """Totals and per-run summaries for the last N days."""
    with strava_errors():
        return await service.training_summary(days=request.days)


@router.post("/compare-weeks", response_model=WeekComparisonResponse)
async def compare_weeks(
    request: CompareWeeksRequest = CompareWeeksRequest(),
    service: CoachService = Depends(get_coach_service),
):
    """This week against the previous one."""
    with strava_errors():
        return await service.compare_training_weeks(request.current_week_start)


@router.post("/coaching-advice", response_model=CoachingAdviceResponse)
async def coaching_advice(
    request: CoachingAdviceRequest = CoachingAdviceRequest(),
    service: CoachService = Depends(get_coach_service),
):
    """Recent load and training state."""
    with strava_errors():
        return await service.coaching_advice(request.context)


@router.post("/training-load", response_model=TrainingLoadResponse)
async def training_load(service: CoachService = Depends(get_coach_service)):
    """Acute:chronic load ratio and injury-risk band."""
    with strava_errors():
        return await service.training_load()


@router.post("/elevation-trends", response_model=ElevationTrendsResponse)
async def elevation_trends(
    request: ElevationTrendsRequest = ElevationTrendsRequest(),
    service: CoachService = Depends(get_coach_service),
):
    with strava_errors():
        return await service.elevation_trends(days=request.days, top_n=request.top_n)


@router.post("/pace-patterns", response_model=PacePatternsResponse)
async def pace_patterns(
    request: PacePatternsRequest = PacePatternsRequest(),
    service: CoachService = Depends(get_coach_service),
):
    with strava_errors():
        return await service.pace_patterns(group_by=request.group_by, days=request.days)


@router.post("/run-progression", response_model=RunProgressionResponse)
async def run_progression(
    request: RunProgressionRequest,
    service: CoachService = Depends(get_coach_service),
):
    with strava_errors():
        return await service.run_progression(request.route, days=request.days)


@router.post("/compare-runs", response_model=RunComparisonResponse)
async def compare_runs(
    request: CompareRunsRequest,
    service: CoachService = Depends(get_coach_service),
):
    """Compare two runs by Strava activity id."""
    with strava_errors():
        return await service.compare_runs(request.first_id, request.second_id)


@router.post("/export-route", response_model=RouteExportResponse)
async def export_route(
    request: RouteExportRequest,
    service: CoachService = Depends(get_coach_service),
    client: StravaClient = Depends(get_strava_client),
):
    """
    Upload a planned route to Strava.

    Waits for Strava to process the upload (up to ~20 s with defaults).
    """
    with strava_errors():
        return await service.export_route(request, StravaUploader(client))
