"""
Numeric helpers shared by the latent deriver, unit aggregator and play models.

Every sampled quantity in the engine is clamped through these helpers before it
touches field position, clock or probabilities.
"""

import math
from typing import Iterable, Optional


LOGIT_EPSILON = 1e-9


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    if value < low:
        return low
    if value > high:
        return high
    return value


def clamp01(value: float) -> float:
    """Clamp value into [0, 1]. Non-finite input collapses to 0."""
    if value is None or not math.isfinite(value):
        return 0.0
    return clamp(value, 0.0, 1.0)


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def logistic(x: float) -> float:
    # Split on sign so large magnitudes never overflow math.exp
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


def logit(p: float) -> float:
    p = clamp(p, LOGIT_EPSILON, 1.0 - LOGIT_EPSILON)
    return math.log(p / (1.0 - p))


def is_finite_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def mean_or_default(values: Iterable[Optional[float]], default: float = 0.5) -> float:
    """
    Mean of the finite values in an iterable.

    Args:
        values: Candidate numbers; None and non-finite entries are skipped
        default: Returned when nothing usable remains

    Returns:
        Arithmetic mean or the default
    """
    usable = [v for v in values if is_finite_number(v)]
    if not usable:
        return default
    return sum(usable) / len(usable)
