"""
GPX-related schemas.

Pydantic models for GPX export and inspection.
"""

from pydantic import BaseModel, Field
from typing import Optional


class GPXTrackPoint(BaseModel):
    """Single point of an exported track."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    elevation: Optional[float] = None


class GPXMetadata(BaseModel):
    """Document-level GPX metadata."""

    name: str
    description: Optional[str] = None
    author: Optional[str] = None
    time: Optional[str] = Field(
        default=None,
        description="ISO-8601 timestamp; defaults to the export time"
    )


class GPXInfo(BaseModel):
    """Summary of an inspected GPX file."""

    name: Optional[str] = None
    description: Optional[str] = None

    # Metrics
    distance_km: float
    elevation_gain_m: float
    elevation_loss_m: float

    # Points
    points_count: int = 0
    start_lat: Optional[float] = None
    start_lng: Optional[float] = None

    # Route type
    is_loop: bool = False  # True if start and end points are close (< 500m)

    polyline: str = ""
