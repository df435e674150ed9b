"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

import logging
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "https://chatgpt.com"],
        description="Allowed CORS origins"
    )

    # === Strava ===
    strava_api_url: str = Field(
        default="https://www.strava.com/api/v3",
        description="Strava REST API base URL"
    )
    strava_web_url: str = Field(
        default="https://www.strava.com",
        description="Strava website URL (activity links)"
    )
    http_timeout_seconds: float = Field(default=30.0)
    activities_per_page: int = Field(default=30)
    activity_fetch_days: int = Field(
        default=30,
        description="History window fetched for summaries and comparisons"
    )

    # === Activity cache ===
    activity_cache_ttl_seconds: float = Field(
        default=900.0,
        description="How long a fetched activity list is reused"
    )
    activity_cache_max_entries: int = Field(
        default=512,
        description="Cached activity lists kept before the oldest is evicted"
    )

    # === Upload polling ===
    upload_poll_attempts: int = Field(default=10)
    upload_poll_delay_seconds: float = Field(default=2.0)

    # === GPX ===
    gpx_creator: str = Field(
        default="Strava Running Coach",
        description="Creator attribute and default author of exported GPX"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the level and reject unknown names."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator('strava_api_url', 'strava_web_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
