"""
Strava integration.

Usage:
    from strava_coach.features.strava import StravaClient, StravaUploader

Components:
- client: REST client and exception hierarchy
- upload: GPX upload and status polling
- cache: per-athlete activity cache
"""

from .client import (
    StravaClient,
    StravaError,
    StravaAPIError,
    StravaAuthError,
    StravaRateLimitError,
    StravaUploadError,
    ActivityNotFoundError,
    parse_header_int,
)
from .upload import StravaUploader, UploadStatus
from .cache import ActivityCache, CacheEntry, cache_key

__all__ = [
    "StravaClient",
    "StravaError",
    "StravaAPIError",
    "StravaAuthError",
    "StravaRateLimitError",
    "StravaUploadError",
    "ActivityNotFoundError",
    "parse_header_int",
    "StravaUploader",
    "UploadStatus",
    "ActivityCache",
    "CacheEntry",
    "cache_key",
]
