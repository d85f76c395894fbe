"""Momentum calculator.

Compares the average of the most recent window of daily rates against the
window immediately before it.
"""

import logging
from typing import Optional, Sequence

from .utils import safe_mean

logger = logging.getLogger(__name__)

MOMENTUM_WINDOW_DAYS = 14
WEEKLY_WINDOW_DAYS = 7


def calculate_momentum(
    rates: Sequence[float],
    window: int = MOMENTUM_WINDOW_DAYS
) -> Optional[float]:
    """Percentage change of the recent window average over the previous one.

    Args:
        rates: Chronological daily rates (0-100)
        window: Size of each window in days (default: 14)

    Returns:
        Momentum in percent, or None when either window is empty or the
        previous window averaged exactly 0

    Examples:
        "Momentum +12.5%: last 14 days averaged 45% vs 40% before"
    """
    values = list(rates)
    recent = values[-window:] if window > 0 else []
    old = values[-2 * window:-window] if window > 0 else []

    if not recent or not old:
        logger.debug("Momentum undefined: %d recent, %d previous samples", len(recent), len(old))
        return None

    old_average = safe_mean(old)
    if old_average == 0:
        logger.debug("Momentum undefined: previous window averaged 0")
        return None

    return ((safe_mean(recent) - old_average) / old_average) * 100


def calculate_weekly_momentum(rates: Sequence[float]) -> Optional[float]:
    """Week-over-week (7 vs 7 days) momentum."""
    return calculate_momentum(rates, window=WEEKLY_WINDOW_DAYS)


def format_momentum(value: Optional[float]) -> str:
    """Render momentum as ``+12.5%``, ``-3.0%`` or ``N/A``."""
    if value is None:
        return "N/A"
    return f"{value:+.1f}%"
