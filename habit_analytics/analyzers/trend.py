"""Trend and regression module.

Ordinary least-squares fits over index-positioned series, fitted trend
lines for charts, and has-data-aware rolling averages.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..models import DailyRate, RegressionResult

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def linear_regression(points: Sequence[Point]) -> Optional[RegressionResult]:
    """Fit ``y = slope * x + intercept`` by least squares.

    Args:
        points: ``(x, y)`` pairs

    Returns:
        RegressionResult, or None with fewer than two points or when every x
        is the same

    Examples:
        (0, 0), (1, 2), (2, 4), (3, 6) fit slope 2, intercept 0
    """
    n = len(points)
    if n < 2:
        return None

    sum_x = sum(x for x, _ in points)
    sum_y = sum(y for _, y in points)
    sum_xy = sum(x * y for x, y in points)
    sum_xx = sum(x * x for x, _ in points)

    denominator = n * sum_xx - sum_x ** 2
    if denominator == 0:
        logger.debug("Degenerate regression input: all x values equal")
        return None

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    return RegressionResult(
        slope=slope,
        intercept=intercept,
        r_squared=_r_squared(points, slope, intercept),
        n=n,
    )


def index_points(values: Sequence[Optional[float]]) -> List[Point]:
    """Position each non-None value by its index in the filtered series."""
    present = [value for value in values if value is not None]
    return [(float(index), float(value)) for index, value in enumerate(present)]


def trend_line(values: Sequence[Optional[float]]) -> Optional[List[float]]:
    """Fitted values at each filtered index, or None when no fit exists."""
    points = index_points(values)
    fit = linear_regression(points)
    if fit is None:
        return None
    return [fit.predict(x) for x, _ in points]


def rolling_average(samples: Sequence[DailyRate], window: int = 7) -> List[float]:
    """
    Trailing average per sample, counting only samples that have data.

    A day with no recorded samples in its window averages to 0.

    Args:
        samples: Chronological samples
        window: Number of trailing samples (including the current one)

    Returns:
        One average per sample
    """
    averages = []
    for index in range(len(samples)):
        window_samples = samples[max(0, index - window + 1):index + 1]
        with_data = [sample.rate for sample in window_samples if sample.has_data]
        averages.append(sum(with_data) / len(with_data) if with_data else 0.0)
    return averages


def _r_squared(points: Sequence[Point], slope: float, intercept: float) -> Optional[float]:
    y_mean = sum(y for _, y in points) / len(points)
    total = sum((y - y_mean) ** 2 for _, y in points)
    if total == 0:
        return None
    residual = sum((y - (slope * x + intercept)) ** 2 for x, y in points)
    return 1 - residual / total
