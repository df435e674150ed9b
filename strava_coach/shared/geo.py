"""
Geographic utility functions.

Distances are great-circle approximations; good enough for summarising
a route, not for survey work.
"""
import math
from typing import Sequence

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0

# Start and end closer than this make a route a loop
LOOP_THRESHOLD_KM = 0.5

LatLng = tuple[float, float]


def haversine(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Great-circle distance in kilometers between two points in degrees.
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    half_dphi = math.radians(lat2 - lat1) / 2
    half_dlambda = math.radians(lon2 - lon1) / 2

    h = math.sin(half_dphi) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(half_dlambda) ** 2

    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def path_distance_km(path: Sequence[LatLng]) -> float:
    """
    Total length of an ordered (lat, lng) path.

    Args:
        path: Ordered coordinate pairs in degrees

    Returns:
        Distance in kilometers (0.0 for fewer than two points)
    """
    return sum((
        haversine(lat1, lon1, lat2, lon2)
        for (lat1, lon1), (lat2, lon2) in zip(path, path[1:])
    ), 0.0)


def is_loop(path: Sequence[LatLng]) -> bool:
    """True if the path ends within LOOP_THRESHOLD_KM of its start."""
    if len(path) < 2:
        return False
    (start_lat, start_lon), (end_lat, end_lon) = path[0], path[-1]
    return haversine(start_lat, start_lon, end_lat, end_lon) < LOOP_THRESHOLD_KM
