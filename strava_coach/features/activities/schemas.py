"""
Activity schemas.

Pydantic models mirroring the Strava activity JSON. Records are frozen:
once a record has been fetched no engine may change it.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from strava_coach.shared.formatters import pace_seconds_from_speed


class Split(BaseModel):
    """Per-kilometre split (Strava `splits_metric` entry)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    distance: float = Field(ge=0, description="Metres")
    elapsed_time: int = Field(ge=0, description="Seconds")
    moving_time: int = Field(ge=0, description="Seconds")
    average_speed: float = Field(default=0.0, ge=0, description="m/s")
    average_heartrate: Optional[float] = None
    elevation_difference: Optional[float] = None


class ActivityMap(BaseModel):
    """Route map attached to an activity."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    summary_polyline: Optional[str] = None


class ActivityRecord(BaseModel):
    """
    One completed activity as returned by Strava.

    `start_date_local` is the athlete's wall-clock time. Strava suffixes it
    with 'Z' although it is not UTC, so the timezone is dropped on parse.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str = ""
    distance: float = Field(default=0.0, ge=0, description="Metres")
    moving_time: int = Field(default=0, ge=0, description="Seconds")
    elapsed_time: int = Field(default=0, ge=0, description="Seconds")
    total_elevation_gain: float = Field(default=0.0, ge=0, description="Metres")
    type: str = "Run"
    start_date: datetime
    start_date_local: datetime
    average_speed: float = Field(default=0.0, ge=0, description="m/s")

    # Optional detail fields
    average_heartrate: Optional[float] = None
    max_heartrate: Optional[float] = None
    workout_type: Optional[int] = None
    splits_metric: Optional[List[Split]] = None
    map: Optional[ActivityMap] = None

    @field_validator("start_date_local")
    @classmethod
    def drop_local_timezone(cls, v: datetime) -> datetime:
        return v.replace(tzinfo=None)

    @property
    def distance_km(self) -> float:
        return self.distance / 1000

    @property
    def local_date(self) -> date:
        """Calendar day the activity started, in local time."""
        return self.start_date_local.date()

    @property
    def pace_seconds(self) -> float:
        """Seconds per km; 0.0 when the pace is undefined."""
        return pace_seconds_from_speed(self.average_speed)

    @property
    def has_pace(self) -> bool:
        return self.average_speed > 0

    @property
    def summary_polyline(self) -> Optional[str]:
        return self.map.summary_polyline if self.map else None


class ActivitySummary(BaseModel):
    """Per-run display unit, derived from an ActivityRecord."""

    date: str = Field(..., description="Local calendar day, YYYY-MM-DD")
    distance: float = Field(..., description="Kilometres, one decimal")
    pace: str = Field(..., description="M:SS per km")
    duration: int = Field(..., description="Moving time, minutes")
