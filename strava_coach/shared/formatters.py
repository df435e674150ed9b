"""
Pace and unit formatting for display.

Paces are always "M:SS" per kilometre. A speed of zero means the athlete
did not move; it formats as the "0:00" sentinel rather than raising.
"""

import math

from .formulas import round_half_up


NO_PACE = "0:00"
METERS_PER_KM = 1000.0


def pace_seconds_from_speed(mps: float) -> float:
    """
    Seconds needed to cover one kilometre at the given speed.

    Args:
        mps: Speed in metres per second

    Returns:
        Seconds per km, or 0.0 when speed is not positive
    """
    if mps <= 0:
        return 0.0
    return METERS_PER_KM / mps


def seconds_to_pace(seconds_per_km: float) -> str:
    """
    Format seconds per km as 'M:SS'.

    Seconds are rounded half-up without carrying into minutes, so
    299.6 s/km formats as '4:60'. Downstream displays rely on this
    exact output.

    Args:
        seconds_per_km: Pace in seconds (e.g. 330.0)

    Returns:
        Formatted string (e.g. '5:30'), '0:00' for non-positive input
    """
    if seconds_per_km <= 0:
        return NO_PACE

    minutes = math.floor(seconds_per_km / 60)
    seconds = round_half_up(seconds_per_km % 60)

    return f"{minutes}:{seconds:02d}"


def pace_from_speed(mps: float) -> str:
    """
    Convert metres per second to 'M:SS' per km.

    Args:
        mps: Speed in metres per second

    Returns:
        Formatted pace (e.g. 3.0303 -> '5:30'), '0:00' for zero speed
    """
    if mps <= 0:
        return NO_PACE
    return seconds_to_pace(METERS_PER_KM / mps)


def pace_to_seconds(pace: str) -> int:
    """
    Parse an 'M:SS' pace into total seconds.

    Malformed strings yield 0, the same value as the '0:00' sentinel.
    """
    minutes, sep, seconds = pace.partition(":")
    if not sep:
        return 0
    try:
        return int(minutes) * 60 + int(seconds)
    except ValueError:
        return 0


def format_distance_km(km: float) -> str:
    """
    Format distance.

    Args:
        km: Distance in kilometers

    Returns:
        Formatted string (e.g., '12.5 km' or '850 m')
    """
    if km < 1:
        return f"{int(km * 1000)} m"
    return f"{km:.1f} km"


def format_elevation(meters: float) -> str:
    """
    Format elevation with sign.

    Args:
        meters: Elevation in meters

    Returns:
        Formatted string (e.g., '+850 m')
    """
    if meters >= 0:
        return f"+{int(meters)} m"
    return f"{int(meters)} m"


def format_signed(value: float, unit: str = "") -> str:
    """Prefix positive values with '+' (e.g. '+12%', '-8s/km', '0')."""
    prefix = "+" if value > 0 else ""
    return f"{prefix}{value}{unit}"
