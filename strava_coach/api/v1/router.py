"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from strava_coach.api.v1.routes import gpx, tools

api_router = APIRouter()

api_router.include_router(tools.router, prefix="/tools", tags=["Coach tools"])
api_router.include_router(gpx.router, prefix="/gpx", tags=["GPX"])
