"""Strava Running Coach: training metrics and route export for runners."""

__version__ = "0.1.0"
