"""Volatility and consistency scorer.

Turns daily completion rates into 0-100 stability and consistency scores,
and flags burnout risk when recent stability drops alongside momentum.
"""

import logging
import statistics
from typing import List, Sequence

from ..models import BurnoutRisk, RiskLevel
from .momentum import calculate_weekly_momentum
from .utils import clamp, round_half_up, safe_mean

logger = logging.getLogger(__name__)

MIN_VOLATILITY_SAMPLES = 5
MIN_CONSISTENCY_SAMPLES = 7
ROLLING_WINDOW_DAYS = 7
HABIT_LOOKBACK_DAYS = 28
BURNOUT_LOOKBACK_DAYS = 14

# Scale factors mapping a standard deviation onto the 0-100 stability range
AGGREGATE_SD_SCALE = 3.33
HABIT_SD_SCALE = 28.57


def calculate_volatility(rates: Sequence[float], aggregate: bool = False) -> int:
    """Stability score; 100 means perfectly steady.

    Aggregate mode works on the raw daily rates. Per-habit mode counts fully
    completed days (rate == 100) in each 7-day window across the last 28
    values and measures how much those weekly counts vary.

    Args:
        rates: Chronological daily rates (0-100)
        aggregate: True for all-habit rate series, False for one habit

    Returns:
        Stability 0-100, or 0 with fewer than 5 samples
    """
    values = list(rates)
    if len(values) < MIN_VOLATILITY_SAMPLES:
        logger.debug("Only %d samples; stability defaults to 0", len(values))
        return 0

    if aggregate:
        deviation = statistics.pstdev(values)
        return round_half_up(clamp(100 - deviation * AGGREGATE_SD_SCALE))

    recent = values[-HABIT_LOOKBACK_DAYS:]
    weekly_counts = [
        sum(1 for rate in recent[start:start + ROLLING_WINDOW_DAYS] if rate == 100)
        for start in range(len(recent) - ROLLING_WINDOW_DAYS + 1)
    ]
    if not weekly_counts:
        return 0

    deviation = statistics.pstdev(weekly_counts)
    return round_half_up(clamp(100 - deviation * HABIT_SD_SCALE))


def rolling_averages(rates: Sequence[float], window: int = ROLLING_WINDOW_DAYS) -> List[float]:
    """Trailing means, one per index from ``window - 1`` onwards."""
    values = list(rates)
    return [
        safe_mean(values[end - window + 1:end + 1])
        for end in range(window - 1, len(values))
    ]


def calculate_trend_consistency(averages: Sequence[float]) -> float:
    """How smoothly a rolling-average series moves; 100 means flat.

    Returns 0 with fewer than two averages.
    """
    values = list(averages)
    if len(values) < 2:
        return 0.0
    changes = [abs(b - a) for a, b in zip(values, values[1:])]
    return clamp(100 - safe_mean(changes) * 5)


def calculate_consistency_score(rates: Sequence[float]) -> int:
    """
    Weighted consistency score from stability, level and smoothness.

    40% stability of the 7-day rolling averages, 30% average completion
    (capped at 100) and 30% trend consistency.

    Args:
        rates: Chronological daily rates (0-100)

    Returns:
        Score 0-100, or 0 with fewer than 7 samples
    """
    values = list(rates)
    if len(values) < MIN_CONSISTENCY_SAMPLES:
        logger.debug("Only %d samples; consistency defaults to 0", len(values))
        return 0

    averages = rolling_averages(values)
    stability = calculate_volatility(averages, aggregate=True)
    completion = min(100.0, safe_mean(values))
    smoothness = calculate_trend_consistency(averages)

    return round_half_up(stability * 0.4 + completion * 0.3 + smoothness * 0.3)


def calculate_burnout_risk(rates: Sequence[float]) -> BurnoutRisk:
    """
    Burnout risk from the last two weeks of aggregate rates.

    The trend is week-over-week momentum inside those 14 days; undefined
    momentum counts as no trend.

    Args:
        rates: Chronological daily rates (0-100)

    Returns:
        BurnoutRisk with level, recommendation and 0-100 score
    """
    recent = list(rates)[-BURNOUT_LOOKBACK_DAYS:]
    stability = calculate_volatility(recent, aggregate=True)
    trend = calculate_weekly_momentum(recent)
    if trend is None:
        trend = 0.0

    if stability < 70 and trend < -10:
        level = RiskLevel.HIGH
        recommendation = "Consider reducing habit complexity temporarily"
    elif stability < 80 or trend < -5:
        level = RiskLevel.MEDIUM
        recommendation = "Monitor energy levels and adjust as needed"
    else:
        level = RiskLevel.LOW
        recommendation = "Maintain current pace"

    score = min(100, round_half_up(100 - stability + abs(trend) / 2))
    return BurnoutRisk(level=level, recommendation=recommendation, score=score)
