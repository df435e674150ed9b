"""
Polyline encoder (Google encoded polyline algorithm).

Thin wrapper over the `polyline` package. Coordinates are rounded to 1e5
fixed point and written as deltas from the previous point, so precision
below ~1 m is lost. Only encoding is needed here: Strava and the map
renderer decode.

Reference:
    https://developers.google.com/maps/documentation/utilities/polylinealgorithm
"""

from typing import Iterable, Tuple

import polyline

# Decimal digits kept per coordinate
PRECISION = 5


def encode_polyline(points: Iterable[Tuple[float, float]]) -> str:
    """
    Encode an ordered (lat, lng) path.

    Args:
        points: Coordinates in degrees

    Returns:
        Encoded polyline; '' for an empty path

    Example:
        >>> encode_polyline([(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)])
        '_p~iF~ps|U_ulLnnqC_mqNvxq`@'
    """
    path = [(lat, lng) for lat, lng in points]
    if not path:
        return ""
    return polyline.encode(path, PRECISION)
