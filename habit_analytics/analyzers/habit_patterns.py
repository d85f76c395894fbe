"""Habit pattern analyzer.

Secondary dashboard figures: best day of the week, habit diversity across
life areas, performance of numeric and rating habits, category breakdown
and progress against a target completion rate.
"""

import logging
from collections import Counter
from datetime import date
from typing import Dict, List, Optional, Sequence

from ..models import (
    AnyHabit,
    CategoryStats,
    GoalProgress,
    HabitDiversity,
    HabitType,
    PerformanceStats,
    TimePattern,
)
from ..normalizer import is_number, completion_map, is_satisfied
from .utils import round_half_up, safe_mean

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
POINTS_PER_CATEGORY = 20
DEFAULT_GOAL_RATE = 80.0
UNCATEGORIZED = "Uncategorized"


def analyze_time_patterns(dates: Sequence[date], lookback_days: int = 90) -> TimePattern:
    """Find the weekday on which a habit is most often completed.

    Args:
        dates: Completion dates
        lookback_days: Days the dates were drawn from, for the completion rate

    Returns:
        TimePattern; "Unknown" day when there are no dates

    Examples:
        "Best day: Tue (40% of completions)"
    """
    if not dates:
        return TimePattern()

    # Counter keeps first-seen order, so ties go to the earliest weekday seen
    weekday_counts = Counter(day.weekday() for day in dates)
    best_weekday, best_count = max(weekday_counts.items(), key=lambda item: item[1])
    day_success_rate = round_half_up(best_count / len(dates) * 100)

    completion_rate = 0
    if lookback_days > 0:
        completion_rate = min(100, round_half_up(len(set(dates)) / lookback_days * 100))

    return TimePattern(
        optimal_day=WEEKDAY_NAMES[best_weekday],
        day_success_rate=day_success_rate,
        completion_rate=completion_rate,
        consistency="Very consistent" if day_success_rate > 80 else "Moderately consistent",
    )


def calculate_habit_diversity(habits: Sequence[AnyHabit]) -> HabitDiversity:
    """Score how many distinct categories the habits span."""
    categories = {habit.category for habit in habits}
    count = len(categories)

    if count < 3:
        recommendation = "Consider adding habits from other life areas"
    elif count < 5:
        recommendation = "Good variety, room to expand"
    else:
        recommendation = "Excellent habit distribution"

    return HabitDiversity(
        score=min(100, count * POINTS_PER_CATEGORY),
        categories=count,
        recommendation=recommendation,
    )


def calculate_performance_stats(
    habit: AnyHabit,
    user_id: Optional[str] = None
) -> Optional[PerformanceStats]:
    """
    Average and best recorded value for numeric and rating habits.

    Numeric habits pick the best value in the goal direction; ratings use
    the highest score. A rating average at 80% of the scale maximum or more
    counts as meeting the goal.

    Args:
        habit: Habit to summarise
        user_id: Member to read for group habits

    Returns:
        PerformanceStats, or None for boolean habits and habits with no
        numeric entries
    """
    if habit.type == HabitType.BOOLEAN:
        return None

    values = [value for value in completion_map(habit, user_id).values() if is_number(value)]
    if not values:
        logger.debug("No numeric entries for %s", habit.name)
        return None

    average = safe_mean(values)

    if habit.type == HabitType.NUMERIC:
        config = habit.config
        best = max(values) if config.higher_is_better else min(values)
        if config.higher_is_better:
            goal_met = average >= config.goal
        else:
            goal_met = average <= config.goal
        unit = config.unit
        details = f"Best: {_format_number(best)} {unit}".rstrip()
    else:
        best = max(values)
        goal_met = average >= habit.config.max * 0.8
        unit = ""
        details = "You're crushing it!" if goal_met else "Keep at it!"

    return PerformanceStats(
        average=average,
        best=best,
        unit=unit,
        goal_met=goal_met,
        details=details,
        sample_size=len(values),
    )


def analyze_categories(
    habits: Sequence[AnyHabit],
    user_id: Optional[str] = None
) -> List[CategoryStats]:
    """Completion rate per category over every tracked day.

    Habits without a category are grouped as "Uncategorized". Categories
    appear in first-seen order.
    """
    totals: Dict[str, List[int]] = {}
    for habit in habits:
        category = habit.category or UNCATEGORIZED
        values = completion_map(habit, user_id)
        tracked, completed = totals.setdefault(category, [0, 0])
        totals[category] = [
            tracked + len(values),
            completed + sum(1 for value in values.values() if is_satisfied(habit, value)),
        ]

    return [
        CategoryStats(
            category=category,
            completion_rate=(completed / tracked) * 100 if tracked else 0.0,
            tracked_days=tracked,
            completed_days=completed,
        )
        for category, (tracked, completed) in totals.items()
    ]


def calculate_goal_progress(
    habit: AnyHabit,
    goal_rate: float = DEFAULT_GOAL_RATE,
    user_id: Optional[str] = None
) -> GoalProgress:
    """Completion rate over tracked days compared with a target rate."""
    values = completion_map(habit, user_id)
    completed = sum(1 for value in values.values() if is_satisfied(habit, value))
    rate = (completed / len(values)) * 100 if values else 0.0
    return GoalProgress(completion_rate=rate, goal_rate=goal_rate, achieved=rate >= goal_rate)


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.1f}"
