"""
Completion normalizer.

Extracts per-day completion values from the two storage shapes the habit
store hands us:
- personal habits: a date-keyed map of values
- group habits: a list of per-member ``{user_id, date, completed}`` records

Every analyzer goes through this module, so "not tracked" (``None``) and
"tracked and failed" stay distinguishable everywhere.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from .models import (
    AnyHabit,
    CompletionEntry,
    CompletionStatus,
    CompletionValue,
    DailyRate,
    GroupHabit,
    HabitType,
    NumericHabitConfig,
    RatingHabitConfig,
)

logger = logging.getLogger(__name__)

# Numeric habits at or above this share of the goal show as partial
PARTIAL_PROGRESS_THRESHOLD = 70.0


def is_group_habit(habit: AnyHabit) -> bool:
    """Whether the habit stores per-member completion records."""
    return isinstance(habit, GroupHabit)


def parse_day(value: str) -> date:
    """Parse an ISO date, ignoring any ``T...`` time suffix."""
    return date.fromisoformat(value.split("T")[0])


def is_number(value: Optional[CompletionValue]) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _group_records(habit: GroupHabit, user_id: Optional[str]) -> Dict[date, CompletionValue]:
    """De-duplicate group records by (user, date); last record wins.

    With no ``user_id`` the first member's record for each date is kept.
    """
    by_member: Dict[tuple, CompletionValue] = {}
    order: List[tuple] = []
    for record in habit.completions:
        if user_id is not None and record.user_id != user_id:
            continue
        key = (record.user_id, parse_day(record.date))
        if key not in by_member:
            order.append(key)
        by_member[key] = record.completed

    values: Dict[date, CompletionValue] = {}
    for key in order:
        day = key[1]
        if day not in values:
            values[day] = by_member[key]
    return values


def completion_map(habit: AnyHabit, user_id: Optional[str] = None) -> Dict[date, CompletionValue]:
    """Date -> value map for either habit variant."""
    if is_group_habit(habit):
        return _group_records(habit, user_id)
    return {parse_day(key): value for key, value in habit.completions.items()}


def completion_value(
    habit: AnyHabit,
    day: date,
    user_id: Optional[str] = None
) -> Optional[CompletionValue]:
    """
    Effective completion value of a habit on a date.

    Args:
        habit: Personal or group habit
        day: Calendar date to look up
        user_id: Member whose record to read for group habits

    Returns:
        The stored value, or None when nothing was recorded for that date
    """
    return completion_map(habit, user_id).get(day)


def iter_completions(habit: AnyHabit, user_id: Optional[str] = None) -> List[CompletionEntry]:
    """Uniform, date-sorted ``{date, value}`` sequence for any habit variant."""
    values = completion_map(habit, user_id)
    return [CompletionEntry(date=day, value=values[day]) for day in sorted(values)]


def is_satisfied(habit: AnyHabit, value: Optional[CompletionValue]) -> bool:
    """
    Whether a recorded value meets the habit's goal.

    Boolean habits need exactly ``True``. Numeric habits compare against the
    goal in the configured direction. Rating habits need an exact match.
    Missing values never satisfy.
    """
    if value is None:
        return False

    if habit.type == HabitType.BOOLEAN:
        return value is True

    if not is_number(value):
        return False

    if habit.type == HabitType.NUMERIC:
        config: NumericHabitConfig = habit.config
        return value >= config.goal if config.higher_is_better else value <= config.goal

    if habit.type == HabitType.RATING:
        config: RatingHabitConfig = habit.config
        return value == config.goal

    return False


def is_close_to_goal(habit: AnyHabit, value: Optional[CompletionValue]) -> bool:
    """Rating habits only: value within one point of the goal."""
    if habit.type != HabitType.RATING or not is_number(value):
        return False
    return abs(value - habit.config.goal) <= 1


def completion_status(habit: AnyHabit, value: Optional[CompletionValue]) -> CompletionStatus:
    """Classify a day's value as complete, partial, incomplete or untracked."""
    if value is None:
        return CompletionStatus.UNTRACKED
    if is_satisfied(habit, value):
        return CompletionStatus.COMPLETE

    if habit.type == HabitType.NUMERIC and is_number(value) and habit.config.goal:
        progress = (value / habit.config.goal) * 100
        # Lower-is-better goals have no meaningful partial state
        if habit.config.higher_is_better and progress >= PARTIAL_PROGRESS_THRESHOLD:
            return CompletionStatus.PARTIAL
    elif is_close_to_goal(habit, value):
        return CompletionStatus.PARTIAL

    return CompletionStatus.INCOMPLETE


def satisfied_dates(habit: AnyHabit, user_id: Optional[str] = None) -> List[date]:
    """Sorted dates on which the habit's goal was met."""
    return [
        entry.date for entry in iter_completions(habit, user_id)
        if is_satisfied(habit, entry.value)
    ]


def tracked_dates(habit: AnyHabit, user_id: Optional[str] = None) -> List[date]:
    """Sorted dates with any recorded value."""
    return sorted(completion_map(habit, user_id))


def earliest_completion_date(
    habits: Iterable[AnyHabit],
    user_id: Optional[str] = None
) -> Optional[date]:
    """Earliest recorded date across all habits, or None if nothing is recorded."""
    earliest: Optional[date] = None
    for habit in habits:
        dates = tracked_dates(habit, user_id)
        if dates and (earliest is None or dates[0] < earliest):
            earliest = dates[0]
    return earliest


def aggregate_daily_rates(
    habits: Sequence[AnyHabit],
    days: Sequence[date],
    user_id: Optional[str] = None
) -> List[DailyRate]:
    """
    Percentage of habits satisfied on each day.

    Args:
        habits: Habits pooled into the rate
        days: Ordered dates to sample
        user_id: Member to read for group habits

    Returns:
        One DailyRate per day; rate is 0 when there are no habits
    """
    if not habits:
        logger.debug("No habits supplied; aggregate rates default to 0")

    maps = [(habit, completion_map(habit, user_id)) for habit in habits]
    rates = []
    for day in days:
        completed = sum(1 for habit, values in maps if is_satisfied(habit, values.get(day)))
        rate = (completed / len(maps)) * 100 if maps else 0.0
        rates.append(DailyRate(date=day, rate=rate, completed_count=completed))
    return rates


def habit_daily_rates(
    habit: AnyHabit,
    days: Sequence[date],
    user_id: Optional[str] = None
) -> List[DailyRate]:
    """0/100 completion series for a single habit."""
    values = completion_map(habit, user_id)
    rates = []
    for day in days:
        value = values.get(day)
        done = is_satisfied(habit, value)
        rates.append(DailyRate(
            date=day,
            rate=100.0 if done else 0.0,
            completed_count=1 if done else 0,
            has_data=value is not None,
        ))
    return rates


def daily_value(habit: AnyHabit, value: Optional[CompletionValue]) -> float:
    """Chartable value: 0/100 for boolean entries, the raw number otherwise."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 100.0 if value else 0.0
    if habit.type == HabitType.BOOLEAN:
        return 100.0 if value else 0.0
    if is_number(value):
        return float(value)
    return 0.0


def habit_daily_values(
    habit: AnyHabit,
    days: Sequence[date],
    user_id: Optional[str] = None
) -> List[DailyRate]:
    """Per-day values for charts; numeric/rating habits keep their raw value."""
    values = completion_map(habit, user_id)
    series = []
    for day in days:
        value = values.get(day)
        series.append(DailyRate(
            date=day,
            rate=daily_value(habit, value),
            completed_count=1 if is_satisfied(habit, value) else 0,
            has_data=value is not None,
        ))
    return series
