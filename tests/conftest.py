"""
Shared fixtures.

`make_run` builds ActivityRecord instances from a few readable values;
speed defaults to distance / moving time like Strava computes it.
"""

from datetime import datetime

import pytest

from strava_coach.features.activities.schemas import ActivityRecord


def build_run(
    id: int = 1,
    name: str = "Morning Run",
    distance: float = 5000.0,
    moving_time: int = 1500,
    start: str = "2024-03-13T07:00:00",
    elevation: float = 0.0,
    speed: float = None,
    workout_type: int = None,
    average_heartrate: float = None,
    type: str = "Run",
) -> ActivityRecord:
    if speed is None:
        speed = distance / moving_time if moving_time else 0.0

    return ActivityRecord(
        id=id,
        name=name,
        distance=distance,
        moving_time=moving_time,
        elapsed_time=moving_time,
        total_elevation_gain=elevation,
        type=type,
        start_date=f"{start}Z",
        start_date_local=f"{start}Z",
        average_speed=speed,
        workout_type=workout_type,
        average_heartrate=average_heartrate,
    )


def run_json(**kwargs) -> dict:
    """Strava-style JSON for a run, as returned by the API."""
    return build_run(**kwargs).model_dump(mode="json")


@pytest.fixture
def make_run():
    return build_run


@pytest.fixture
def as_of():
    """Wednesday 2024-03-13, 20:00 local."""
    return datetime(2024, 3, 13, 20, 0)


@pytest.fixture
def make_run_json():
    return run_json
