"""
Date windows for analytics.

Builds the ordered calendar ranges each analysis runs over: lifetime,
calendar year, the last two weeks, an explicit day count, month look-backs
and the capped chart window.
"""

import calendar
import logging
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from .models import AnyHabit, CompletionRate
from .normalizer import earliest_completion_date

logger = logging.getLogger(__name__)

CHART_DAYS_WIDE = 30
CHART_DAYS_NARROW = 14


class WindowPeriod(Enum):
    """Named analysis periods."""
    LIFETIME = "lifetime"
    YEAR = "year"
    TWO_WEEKS = "twoWeeks"


PERIOD_LABELS = {
    WindowPeriod.LIFETIME: "Since you started tracking",
    WindowPeriod.YEAR: "This year",
    WindowPeriod.TWO_WEEKS: "Last two weeks",
}

Period = Union[WindowPeriod, str, int]


def date_range(start: date, end: date) -> List[date]:
    """Every date in ``[start, end]``; empty when start is after end."""
    if start > end:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def months_back(anchor: date, months: int) -> date:
    """Same day ``months`` calendar months earlier, clamped to month length."""
    month_index = anchor.year * 12 + (anchor.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _coerce_period(period: Period) -> Union[WindowPeriod, int]:
    if isinstance(period, WindowPeriod):
        return period
    if isinstance(period, bool):
        raise ValueError(f"Unsupported period: {period!r}")
    if isinstance(period, int):
        if period < 0:
            raise ValueError("Day count must not be negative")
        return period
    return WindowPeriod(period)


def window_start(
    period: Period,
    anchor: date,
    habits: Iterable[AnyHabit] = (),
    user_id: Optional[str] = None
) -> date:
    """First date of the window for ``period`` ending at ``anchor``."""
    period = _coerce_period(period)

    if period == WindowPeriod.LIFETIME:
        earliest = earliest_completion_date(habits, user_id)
        if earliest is None:
            logger.debug("No completions recorded; lifetime window collapses to %s", anchor)
            return anchor
        return earliest
    if period == WindowPeriod.YEAR:
        return date(anchor.year, 1, 1)
    if period == WindowPeriod.TWO_WEEKS:
        return anchor - timedelta(days=14)
    return anchor - timedelta(days=period)


def build_window(
    period: Period,
    anchor: Optional[date] = None,
    habits: Iterable[AnyHabit] = (),
    user_id: Optional[str] = None
) -> List[date]:
    """
    Ordered dates of a named window, inclusive on both ends.

    Args:
        period: "lifetime", "year", "twoWeeks", a WindowPeriod, or a day count n
            meaning ``anchor - n`` through ``anchor``
        anchor: Last date of the window (defaults to today)
        habits: Habits whose earliest completion bounds the lifetime window
        user_id: Member to read for group habits

    Returns:
        List of dates; ``[anchor]`` for a lifetime window with no completions
    """
    anchor = anchor or date.today()
    return date_range(window_start(period, anchor, habits, user_id), anchor)


def chart_window(
    habits: Sequence[AnyHabit],
    anchor: Optional[date] = None,
    narrow: bool = False,
    user_id: Optional[str] = None,
    wide_days: int = CHART_DAYS_WIDE,
    narrow_days: int = CHART_DAYS_NARROW,
) -> List[date]:
    """
    Date range for trend charts.

    Ends the day before ``anchor`` and covers at most ``wide_days`` (or
    ``narrow_days`` on narrow viewports), never reaching back before the
    earliest recorded completion.
    """
    anchor = anchor or date.today()
    end = anchor - timedelta(days=1)
    cap_start = end - timedelta(days=(narrow_days if narrow else wide_days) - 1)

    earliest = earliest_completion_date(habits, user_id)
    if earliest is None:
        return [end]
    return date_range(max(earliest, cap_start), end)


def completion_rate(
    dates: Sequence[date],
    period: Period,
    anchor: Optional[date] = None,
    label: Optional[str] = None
) -> CompletionRate:
    """
    Share of days in a period on which the habit was completed.

    Args:
        dates: Completion dates (any order, duplicates ignored)
        period: Named period or day count
        anchor: End of the period (defaults to today)
        label: Display label override

    Returns:
        CompletionRate with a 0-100 rate
    """
    anchor = anchor or date.today()
    period = _coerce_period(period)

    if period == WindowPeriod.LIFETIME:
        start = min(dates) if dates else anchor
    else:
        start = window_start(period, anchor)

    days_in_period = max(0, (anchor - start).days + 1)
    completions = len({d for d in dates if start <= d <= anchor})
    rate = (completions / days_in_period) * 100 if days_in_period else 0.0

    if label is None:
        label = PERIOD_LABELS.get(period, f"Last {period} days")

    return CompletionRate(rate=rate, label=label, days=days_in_period, completions=completions)
