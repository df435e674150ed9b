"""
Strava Running Coach API

FastAPI application exposing training analysis tools and route export.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from strava_coach import __version__
from strava_coach.config import settings
from strava_coach.api.v1.router import api_router
from strava_coach.features.strava import ActivityCache


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting Strava Running Coach API...")
    app.state.activity_cache = ActivityCache()

    yield

    stats = app.state.activity_cache.stats()
    app.state.activity_cache.clear()
    logger.info(f"Shutting down, dropped {stats['size']} cached activity lists")


# === App Creation ===
app = FastAPI(
    title="Strava Running Coach API",
    description="Training load, pace analysis and route export for Strava runners",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Routes ===
app.include_router(api_router, prefix="/api/v1")


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
