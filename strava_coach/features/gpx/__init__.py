"""
GPX export and inspection.

Components:
- polyline: Google encoded polyline (encode only)
- serializer: GPX 1.1 writer and structural check
- parser: gpxpy-based route reader
"""

from .schemas import GPXTrackPoint, GPXMetadata, GPXInfo
from .polyline import encode_polyline
from .serializer import escape_xml, generate_gpx, validate_gpx
from .parser import extract_points, parse_gpx

__all__ = [
    "GPXTrackPoint",
    "GPXMetadata",
    "GPXInfo",
    "encode_polyline",
    "escape_xml",
    "generate_gpx",
    "validate_gpx",
    "extract_points",
    "parse_gpx",
]
