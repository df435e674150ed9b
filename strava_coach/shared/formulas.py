"""
Numeric helpers shared by the training engines.

Display values across the application are rounded half-up (2.5 -> 3,
-2.5 -> -2) so that figures shown to the athlete do not depend on
Python's round-half-to-even behaviour.
"""

import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, ties towards +infinity.

    Args:
        value: Any finite number

    Returns:
        Rounded integer (e.g. 59.5 -> 60, -0.5 -> 0)
    """
    return int(math.floor(value + 0.5))


def round_to_tenth(value: float) -> float:
    """Round to one decimal place using half-up rounding."""
    return round_half_up(value * 10) / 10


def safe_ratio(numerator: float, denominator: float) -> float:
    """
    Divide, returning 0.0 when the denominator is not positive.

    Used wherever an empty window or a zero-length run would otherwise
    produce a division error.
    """
    if denominator <= 0:
        return 0.0
    return numerator / denominator
