"""
Shared route dependencies.

The Strava access token comes from the `Authorization: Bearer` header and
is passed through to Strava untouched; Strava decides whether it is valid.
"""

import hashlib
from typing import AsyncIterator

from fastapi import Depends, Header, HTTPException, Request

from strava_coach.features.coach import CoachService
from strava_coach.features.strava import ActivityCache, StravaClient


async def get_access_token(authorization: str = Header(default="")) -> str:
    """Extract the bearer token."""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=401,
            detail="Strava access token required (Authorization: Bearer <token>)",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token.strip()


def athlete_key(access_token: str) -> str:
    """Stable cache namespace for a token without keeping the token itself."""
    return hashlib.sha256(access_token.encode("utf-8")).hexdigest()[:16]


def get_activity_cache(request: Request) -> ActivityCache:
    return request.app.state.activity_cache


async def get_strava_client(
    access_token: str = Depends(get_access_token),
) -> AsyncIterator[StravaClient]:
    """Strava client for the request, closed when the response is sent."""
    async with StravaClient(access_token) as client:
        yield client


async def get_coach_service(
    access_token: str = Depends(get_access_token),
    client: StravaClient = Depends(get_strava_client),
    cache: ActivityCache = Depends(get_activity_cache),
) -> CoachService:
    return CoachService(client, cache, user_id=athlete_key(access_token))
