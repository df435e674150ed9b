"""
Elevation profile helpers.

Gain and loss are summed over consecutive samples. Recorded GPS tracks
are noisy, so by default the profile is first passed through a centred
moving average; planned profiles can skip that with a window of 1.
"""
from typing import List, Sequence, Tuple

# Samples per smoothing window (odd, so the window is centred)
DEFAULT_SMOOTHING_WINDOW = 5


def smooth_elevations(
    elevations: Sequence[float],
    window_size: int = DEFAULT_SMOOTHING_WINDOW
) -> List[float]:
    """
    Centred moving average of an elevation profile.

    Near either end the window is cut short and averages what it covers.
    Profiles shorter than one window come back unchanged.
    """
    values = list(elevations)
    if len(values) < window_size:
        return values

    reach = window_size // 2
    last = len(values) - 1
    result = []

    for index in range(len(values)):
        lo, hi = max(0, index - reach), min(last, index + reach)
        span = values[lo:hi + 1]
        result.append(sum(span) / len(span))

    return result


def calculate_elevation_changes(
    elevations: Sequence[float],
    smoothing_window: int = DEFAULT_SMOOTHING_WINDOW
) -> Tuple[float, float]:
    """
    Total climb and descent of a profile.

    Args:
        elevations: Samples in meters, in route order
        smoothing_window: Moving-average window; 1 or less uses raw samples

    Returns:
        (gain_m, loss_m), both non-negative; (0.0, 0.0) for fewer than two samples
    """
    if len(elevations) < 2:
        return 0.0, 0.0

    profile = (
        smooth_elevations(elevations, smoothing_window)
        if smoothing_window > 1 else list(elevations)
    )

    steps = [after - before for before, after in zip(profile, profile[1:])]
    gain = sum(step for step in steps if step > 0)
    loss = -sum(step for step in steps if step < 0)

    return float(gain), float(loss)
