"""
GPX route reader.

Parses uploaded GPX files with gpxpy and summarises the route: distance,
climb, loop detection and the encoded polyline used by the map renderer.
"""

import logging
from typing import List, Tuple

import gpxpy
import gpxpy.gpx

from strava_coach.shared.elevation import calculate_elevation_changes
from strava_coach.shared.geo import is_loop, path_distance_km

from .polyline import encode_polyline
from .schemas import GPXInfo

logger = logging.getLogger(__name__)


RoutePoint = Tuple[float, float, float]


def _load(content: bytes) -> gpxpy.gpx.GPX:
    try:
        return gpxpy.parse(content.decode("utf-8"))
    except Exception as e:
        logger.error(f"Failed to parse GPX: {e}")
        raise ValueError(f"Invalid GPX file: {e}") from e


def _collect_points(gpx: gpxpy.gpx.GPX) -> List[RoutePoint]:
    """Track points first; route points only if there are no tracks."""
    points: List[RoutePoint] = []

    for track in gpx.tracks:
        for segment in track.segments:
            for point in segment.points:
                points.append((point.latitude, point.longitude, point.elevation or 0.0))

    if not points:
        for route in gpx.routes:
            for point in route.points:
                points.append((point.latitude, point.longitude, point.elevation or 0.0))

    return points


def extract_points(content: bytes) -> List[RoutePoint]:
    """
    Extract (lat, lon, elevation) tuples from GPX content.

    Raises:
        ValueError: If the content is not valid GPX
    """
    return _collect_points(_load(content))


def parse_gpx(content: bytes) -> GPXInfo:
    """
    Parse GPX content and summarise the route.

    Args:
        content: GPX file content as bytes

    Returns:
        GPXInfo with route metrics

    Raises:
        ValueError: If GPX is invalid or has no points
    """
    gpx = _load(content)
    points = _collect_points(gpx)
    if not points:
        raise ValueError("GPX file contains no track or route points")

    path = [(lat, lon) for lat, lon, _ in points]
    elevation_gain, elevation_loss = calculate_elevation_changes([p[2] for p in points])

    name = gpx.name or (gpx.tracks[0].name if gpx.tracks else None)
    logger.debug(f"Parsed GPX '{name}': {len(points)} points")

    return GPXInfo(
        name=name,
        description=gpx.description,
        distance_km=round(path_distance_km(path), 2),
        elevation_gain_m=round(elevation_gain, 0),
        elevation_loss_m=round(elevation_loss, 0),
        points_count=len(points),
        start_lat=points[0][0],
        start_lng=points[0][1],
        is_loop=is_loop(path),
        polyline=encode_polyline(path),
    )
