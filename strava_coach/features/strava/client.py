"""
Strava API client.

Thin async wrapper over the Strava REST API for one athlete's access
token. Handles authentication and rate-limit errors; everything else is
returned as validated ActivityRecord models.

Strava API Limits:
- 200 requests per 15 minutes
- 2,000 requests per day

Data Policy:
- Raw activity data is only held for the lifetime of the app process
- GPS coordinates and maps are never stored
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import httpx
from pydantic import ValidationError

from strava_coach.config import settings
from strava_coach.features.activities.schemas import ActivityRecord
from strava_coach.features.activities.summary import runs_only

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class StravaError(Exception):
    """Base Strava error."""
    pass


class StravaAPIError(StravaError):
    """Strava API error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StravaAuthError(StravaError):
    """Authentication/authorization error (token invalid or expired)."""
    pass


class StravaRateLimitError(StravaError):
    """Rate limit exceeded."""

    def __init__(
        self,
        message: str = "Strava API rate limit exceeded",
        retry_after: Optional[int] = None,
        limit: Optional[int] = None,
        usage: Optional[int] = None,
    ):
        super().__init__(message)
        self.retry_after = retry_after
        self.limit = limit
        self.usage = usage


class StravaUploadError(StravaError):
    """Upload rejected, failed while processing, or did not finish in time."""
    pass


class ActivityNotFoundError(StravaError):
    """Requested activity does not exist or is not visible to the athlete."""

    def __init__(self, activity_id: int):
        super().__init__(f"Activity {activity_id} not found")
        self.activity_id = activity_id


def parse_header_int(value: Optional[str]) -> Optional[int]:
    """
    Leading integer of a header value.

    Strava sends usage as '15-minute,daily' pairs (e.g. '180,950'); only
    the first number is kept.
    """
    if not value:
        return None
    digits = ""
    for char in value.strip():
        if not char.isdigit():
            break
        digits += char
    return int(digits) if digits else None


def raise_for_strava_status(response: httpx.Response) -> None:
    """
    Map an error response to the Strava exception hierarchy.

    Raises:
        StravaAuthError: On 401
        StravaRateLimitError: On 429, with the rate-limit headers parsed
        StravaAPIError: On any other non-2xx status
    """
    if response.status_code == 401:
        raise StravaAuthError(
            "Strava API returned 401 Unauthorized - token is invalid or expired"
        )

    if response.status_code == 429:
        error = StravaRateLimitError(
            retry_after=parse_header_int(response.headers.get("Retry-After")),
            limit=parse_header_int(response.headers.get("X-RateLimit-Limit")),
            usage=parse_header_int(response.headers.get("X-RateLimit-Usage")),
        )
        logger.warning(
            f"Strava rate limit hit: usage={error.usage} limit={error.limit} "
            f"retry_after={error.retry_after}"
        )
        raise error

    if not response.is_success:
        raise StravaAPIError(
            f"API error: {response.status_code} - {response.text}",
            status_code=response.status_code,
        )


# =============================================================================
# Strava Client
# =============================================================================

class StravaClient:
    """
    Async client for the Strava API, bound to one access token.

    The token is passed through as is: obtaining and refreshing it is the
    caller's business.

    Usage:
        async with StravaClient(token) as client:
            runs = await client.get_activities_with_details(days=30)
    """

    def __init__(
        self,
        access_token: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.strava_api_url).rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout if timeout is not None else settings.http_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "StravaClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -------------------------------------------------------------------------
    # Raw requests
    # -------------------------------------------------------------------------

    async def request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Make an authenticated API request.

        Raises:
            StravaRateLimitError: If rate limit exceeded
            StravaAuthError: If authentication fails
            StravaAPIError: If API returns an error or is unreachable
        """
        try:
            response = await self._http.request(method, endpoint, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"Strava request {method} {endpoint} failed: {e}")
            raise StravaAPIError(f"Strava API unreachable: {e}") from e

        # Log rate limit headers from Strava
        if "X-RateLimit-Limit" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )

        raise_for_strava_status(response)
        return response

    # -------------------------------------------------------------------------
    # Activities
    # -------------------------------------------------------------------------

    async def get_activities(
        self,
        after: Optional[datetime] = None,
        per_page: Optional[int] = None,
    ) -> List[ActivityRecord]:
        """
        Get the athlete's recent runs.

        Args:
            after: Only activities started after this time
            per_page: Results per page (max 200)

        Returns:
            Run activities only; other sports are dropped

        Note: The list response has no splits or heart-rate detail.
        """
        params = {"per_page": min(per_page or settings.activities_per_page, 200)}
        if after:
            params["after"] = int(after.timestamp())

        response = await self.request("GET", "/athlete/activities", params=params)

        try:
            records = [ActivityRecord.model_validate(item) for item in response.json()]
        except ValidationError as e:
            raise StravaAPIError(f"Unexpected activity payload: {e}") from e

        runs = runs_only(records)
        logger.info(f"Fetched {len(records)} activities, {len(runs)} runs")
        return runs

    async def get_activity(self, activity_id: int) -> ActivityRecord:
        """
        Get detailed activity info (splits, heart rate, map).

        Raises:
            ActivityNotFoundError: If Strava answers 404
        """
        try:
            response = await self.request("GET", f"/activities/{activity_id}")
        except StravaAPIError as e:
            if e.status_code == 404:
                raise ActivityNotFoundError(activity_id) from e
            raise

        try:
            return ActivityRecord.model_validate(response.json())
        except ValidationError as e:
            raise StravaAPIError(f"Unexpected activity payload: {e}") from e

    async def _detail_or_summary(self, record: ActivityRecord) -> ActivityRecord:
        try:
            return await self.get_activity(record.id)
        except StravaError as e:
            logger.warning(f"Failed to fetch details for activity {record.id}: {e}")
            return record

    async def get_activities_with_details(
        self,
        days: int,
        include_details: bool = False,
        now: Optional[datetime] = None,
    ) -> List[ActivityRecord]:
        """
        Runs from the last `days` days, optionally with full detail.

        Detail requests run concurrently. A run whose detail request fails
        keeps its summary record.

        Args:
            days: History window
            include_details: Fetch each run individually (one request per run)
            now: Reference time, defaults to the current UTC time
        """
        now = now or datetime.now(timezone.utc)
        runs = await self.get_activities(after=now - timedelta(days=days))

        if not include_details:
            return runs

        return list(await asyncio.gather(*(self._detail_or_summary(r) for r in runs)))
