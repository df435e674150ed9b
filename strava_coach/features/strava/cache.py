"""
In-memory activity cache.

Holds fetched activity lists per athlete so that several tool calls in
one conversation hit Strava once. The cache is owned by the FastAPI app
state. Entries expire after a TTL so new runs show up, and the number of
entries is bounded; the oldest entry is evicted first.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from strava_coach.config import settings
from strava_coach.features.activities.schemas import ActivityRecord

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    records: List[ActivityRecord]
    fetched_at: datetime
    days: int
    include_details: bool

    @property
    def count(self) -> int:
        return len(self.records)


def cache_key(user_id: str, days: int, include_details: bool) -> str:
    """Key format: 'user:days:details', e.g. 'athlete-1:30:false'."""
    return f"{user_id}:{days}:{str(include_details).lower()}"


class ActivityCache:
    """
    Activity lists keyed by athlete, history window and detail level.

    Args:
        ttl_seconds: Entry lifetime; defaults to settings.activity_cache_ttl_seconds
        max_entries: Size bound; defaults to settings.activity_cache_max_entries
        clock: Returns the current aware UTC time
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        if ttl_seconds is None:
            ttl_seconds = settings.activity_cache_ttl_seconds
        self.ttl = timedelta(seconds=ttl_seconds)
        self.max_entries = max_entries or settings.activity_cache_max_entries
        self._clock = clock
        # Insertion order is fetch order: the first key is the oldest entry
        self._entries: Dict[str, CacheEntry] = {}

    def _is_expired(self, entry: CacheEntry, now: datetime) -> bool:
        return now - entry.fetched_at >= self.ttl

    def get(self, user_id: str, days: int, include_details: bool) -> Optional[CacheEntry]:
        key = cache_key(user_id, days, include_details)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._is_expired(entry, self._clock()):
            del self._entries[key]
            logger.debug(f"Cache entry {key} expired")
            return None

        return entry

    def set(
        self,
        user_id: str,
        days: int,
        include_details: bool,
        records: List[ActivityRecord],
    ) -> CacheEntry:
        now = self._clock()
        key = cache_key(user_id, days, include_details)
        entry = CacheEntry(
            records=list(records),
            fetched_at=now,
            days=days,
            include_details=include_details,
        )

        self._entries.pop(key, None)
        self.prune(now)
        while len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug(f"Evicted cache entry {oldest}")

        self._entries[key] = entry
        logger.debug(f"Cached {entry.count} activities for {user_id} ({days} days)")
        return entry

    def prune(self, now: Optional[datetime] = None) -> int:
        """Drop expired entries; returns how many were removed."""
        now = now or self._clock()
        expired = [k for k, e in self._entries.items() if self._is_expired(e, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self, user_id: Optional[str] = None) -> None:
        """Drop one athlete's entries, or everything when no id is given."""
        if user_id is None:
            self._entries.clear()
            return

        prefix = f"{user_id}:"
        for key in [k for k in self._entries if k.startswith(prefix)]:
            del self._entries[key]

    def stats(self) -> dict:
        return {
            "size": len(self._entries),
            "keys": list(self._entries),
        }
