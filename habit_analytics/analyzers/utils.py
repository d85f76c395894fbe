"""Numeric helpers shared by the analyzers."""

import math
import statistics
from typing import Sequence


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Limit value to ``[low, high]``."""
    return max(low, min(high, value))


def safe_mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return statistics.fmean(values)
