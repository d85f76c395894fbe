"""Habit streak analyzer.

Computes current and best streaks from the dates a habit was satisfied,
counts streak breaks and quick recoveries (missing exactly one day before
resuming), and scores how well the user bounces back.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from ..models import AnyHabit, StreakAnalysis
from ..normalizer import satisfied_dates
from .utils import round_half_up

logger = logging.getLogger(__name__)

EXCELLENT_STREAK_DAYS = 30
STRONG_RECOVERY_RATE = 80
STREAK_POINTS_PER_DAY = 5


def analyze_streaks(dates: Iterable[date]) -> StreakAnalysis:
    """Analyze streaks in a set of satisfied dates.

    Dates are de-duplicated and sorted. A one-day gap continues the run; any
    other gap starts a new run and counts as a break, and a two-day gap (one
    missed day) also counts as a recovery.

    Args:
        dates: Dates on which the habit was satisfied, in any order

    Returns:
        StreakAnalysis. ``current_streak`` is the run ending at the most recent
        date in ``dates``, not necessarily today; see ``current_streak_as_of``.

    Examples:
        Jan 1-5 and Jan 7-10 give best 5, current 4, one break, one recovery.
    """
    sorted_dates = sorted(set(dates))
    if not sorted_dates:
        logger.debug("No satisfied dates; returning empty streak analysis")
        return StreakAnalysis()

    current_streak = 1
    best_streak = 1
    break_count = 0
    recovery_count = 0

    for previous, current in zip(sorted_dates, sorted_dates[1:]):
        gap = (current - previous).days
        if gap == 1:
            current_streak += 1
        else:
            break_count += 1
            if gap == 2:
                recovery_count += 1
            current_streak = 1
        best_streak = max(best_streak, current_streak)

    recovery_rate = (recovery_count / break_count) * 100 if break_count else 100.0

    return StreakAnalysis(
        current_streak=current_streak,
        best_streak=best_streak,
        break_count=break_count,
        recovery_count=recovery_count,
        recovery_rate=recovery_rate,
        last_date=sorted_dates[-1],
        score=calculate_streak_score(best_streak, recovery_rate),
        streak_quality=_streak_quality(best_streak),
        recommendation=get_streak_recommendation(current_streak, best_streak, recovery_rate),
    )


def is_streak_alive(analysis: StreakAnalysis, today: Optional[date] = None) -> bool:
    """A streak is alive when its last date is today or yesterday."""
    if analysis.last_date is None:
        return False
    today = today or date.today()
    return 0 <= (today - analysis.last_date).days <= 1


def current_streak_as_of(analysis: StreakAnalysis, today: Optional[date] = None) -> int:
    """Current streak, or 0 when the most recent completion is older than yesterday."""
    return analysis.current_streak if is_streak_alive(analysis, today) else 0


def analyze_habit_streaks(
    habit: AnyHabit,
    today: Optional[date] = None,
    user_id: Optional[str] = None
) -> StreakAnalysis:
    """
    Streak analysis for one habit, with the current streak as of ``today``.

    Only dates up to ``today`` are considered. A streak whose last completion
    is older than yesterday is reported as 0.

    Args:
        habit: Personal or group habit
        today: Reference date (defaults to today)
        user_id: Member to read for group habits

    Returns:
        StreakAnalysis whose current_streak respects the staleness rule
    """
    today = today or date.today()
    dates = [d for d in satisfied_dates(habit, user_id) if d <= today]
    analysis = analyze_streaks(dates)

    live_streak = current_streak_as_of(analysis, today)
    if live_streak != analysis.current_streak:
        logger.debug(
            "Streak for %s is stale (last completion %s); reporting 0",
            habit.name, analysis.last_date
        )
        analysis.current_streak = live_streak
        analysis.recommendation = get_streak_recommendation(
            live_streak, analysis.best_streak, analysis.recovery_rate
        )
    return analysis


def calculate_streak_score(best_streak: int, recovery_rate: float) -> int:
    """Blend of best streak length and recovery rate, 0-100."""
    if best_streak == 0:
        return 0
    return round_half_up(min(100.0, best_streak * STREAK_POINTS_PER_DAY + recovery_rate / 2))


def get_streak_recommendation(current: int, best: int, recovery: float) -> str:
    """Short coaching line for the streak card."""
    if best == 0:
        return "Start your first streak!"
    if current >= best and best > 7:
        return "You're at your best! Keep the momentum going"
    if recovery > STRONG_RECOVERY_RATE:
        return "Great at getting back on track after breaks"
    return "Focus on small wins to build longer streaks"


def _streak_quality(best_streak: int) -> str:
    if best_streak > EXCELLENT_STREAK_DAYS:
        return "Excellent consistency"
    return "Building momentum"
