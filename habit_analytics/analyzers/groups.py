"""Group analytics.

Streaks, headline statistics, the member leaderboard and achievements for
groups whose members complete a shared set of habits, plus the per-member
and group-average series behind the group trend chart.
"""

import logging
import math
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from ..models import (
    Achievement,
    AchievementCategory,
    CompletionValue,
    DailyRate,
    Group,
    GroupHabit,
    GroupMember,
    GroupStats,
    HabitType,
    MemberStanding,
)
from ..normalizer import completion_map, daily_value, habit_daily_values, is_satisfied
from ..windows import CHART_DAYS_NARROW, CHART_DAYS_WIDE, chart_window
from .trend import rolling_average
from .utils import round_half_up

logger = logging.getLogger(__name__)

STATS_LOOKBACK_DAYS = 30
ACTIVE_MEMBER_DAYS = 7
PERFECT_WEEK_DAYS = 7
CENTURY_COMPLETIONS = 100


def _lookback_start(today: date) -> date:
    """First day of the 30-day statistics window ending today."""
    return today - timedelta(days=STATS_LOOKBACK_DAYS - 1)


def _completion_maps(
    group: Group,
    member_id: Optional[str] = None
) -> List[Tuple[GroupHabit, Dict[date, CompletionValue]]]:
    """One (habit, date -> value) pair per habit and checked member."""
    if member_id is not None:
        member_ids = [member_id]
    else:
        member_ids = [member.id for member in group.member_details]
    return [
        (habit, completion_map(habit, mid))
        for habit in group.habits
        for mid in member_ids
    ]


def _all_done(maps: Sequence[Tuple[GroupHabit, Dict[date, CompletionValue]]], day: date) -> bool:
    return all(is_satisfied(habit, values.get(day)) for habit, values in maps)


def is_date_completed(day: date, group: Group, member_id: Optional[str] = None) -> bool:
    """Whether every group habit was completed on ``day``.

    With ``member_id`` only that member is checked, otherwise every member.
    """
    return _all_done(_completion_maps(group, member_id), day)


def _walk_back(group: Group, today: date, member_id: Optional[str] = None) -> int:
    maps = _completion_maps(group, member_id)
    if not maps:
        return 0
    streak = 0
    day = today
    while _all_done(maps, day):
        streak += 1
        day -= timedelta(days=1)
    return streak


def calculate_group_streak(group: Group, today: Optional[date] = None) -> int:
    """
    Consecutive days, ending today, on which every member completed every habit.

    Returns 0 for groups without habits or members.
    """
    if not group.habits or not group.member_details:
        logger.debug("Group %s has no habits or members; streak is 0", group.name)
        return 0
    return _walk_back(group, today or date.today())


def calculate_member_streak(member_id: str, group: Group, today: Optional[date] = None) -> int:
    """Consecutive days, ending today, on which the member completed every group habit."""
    if not group.habits:
        return 0
    return _walk_back(group, today or date.today(), member_id)


def calculate_group_stats(group: Group, today: Optional[date] = None) -> GroupStats:
    """
    Headline statistics for a group.

    The completion rate covers the last 30 days including today, or fewer
    when the group's first recorded completion is more recent. Active members
    completed at least one habit in the last 7 days.

    Args:
        group: Group with habits and members
        today: Reference date (defaults to today)

    Returns:
        GroupStats with a rounded 0-100 completion rate
    """
    today = today or date.today()

    records: List[tuple] = []
    for habit in group.habits:
        for member in group.member_details:
            for day, value in completion_map(habit, member.id).items():
                if is_satisfied(habit, value):
                    records.append((member.id, day))

    all_days = [
        day for habit in group.habits for day in completion_map(habit).keys()
    ]
    first_day = min(all_days) if all_days else today
    start = max(first_day, _lookback_start(today))
    days_in_window = max(1, (today - start).days + 1)

    possible = len(group.habits) * len(group.member_details) * days_in_window
    total_completions = sum(1 for _, day in records if start <= day <= today)
    completion_rate = round_half_up(total_completions / possible * 100) if possible else 0

    active_since = today - timedelta(days=ACTIVE_MEMBER_DAYS)
    active_members = len({
        member_id for member_id, day in records if active_since <= day <= today
    })

    return GroupStats(
        completion_rate=completion_rate,
        current_streak=calculate_group_streak(group, today),
        total_completions=total_completions,
        active_members=active_members,
    )


def calculate_leaderboard(group: Group, today: Optional[date] = None) -> List[MemberStanding]:
    """
    Per-member standings, best 30-day completion rate first.

    The rate is the member's satisfied records in the last 30 days over
    ``habits x 30``. Last active is the member's latest record of any kind.

    Args:
        group: Group with habits and members
        today: Reference date (defaults to today)

    Returns:
        MemberStanding per member; ties keep member order
    """
    today = today or date.today()
    window_start = _lookback_start(today)
    possible = len(group.habits) * STATS_LOOKBACK_DAYS

    standings = []
    for member in group.member_details:
        maps = _completion_maps(group, member.id)
        satisfied = [
            day for habit, values in maps
            for day, value in values.items() if is_satisfied(habit, value)
        ]
        recorded = [day for _, values in maps for day in values]
        recent = sum(1 for day in satisfied if window_start <= day <= today)

        standings.append(MemberStanding(
            member_id=member.id,
            name=member.name,
            completion_rate=round_half_up(recent / possible * 100) if possible else 0,
            streak=calculate_member_streak(member.id, group, today),
            total_completions=len(satisfied),
            last_active=max(recorded) if recorded else None,
        ))

    return sorted(standings, key=lambda standing: standing.completion_rate, reverse=True)


def calculate_achievements(group: Group, today: Optional[date] = None) -> List[Achievement]:
    """Perfect Week, Century Club and Team Spirit with their progress."""
    today = today or date.today()
    streak = calculate_group_streak(group, today)
    total = sum(
        1
        for habit, values in _completion_maps(group)
        for value in values.values()
        if is_satisfied(habit, value)
    )
    team_spirit = bool(group.habits and group.member_details) and is_date_completed(today, group)

    return [
        Achievement(
            id=1,
            title="Perfect Week",
            description="All members completed their habits for 7 days straight",
            icon="🌟",
            progress=streak,
            target=PERFECT_WEEK_DAYS,
            unlocked=streak >= PERFECT_WEEK_DAYS,
            category=AchievementCategory.STREAK,
        ),
        Achievement(
            id=2,
            title="Century Club",
            description="Group reached 100 total habit completions",
            icon="💯",
            progress=min(total, CENTURY_COMPLETIONS),
            target=CENTURY_COMPLETIONS,
            unlocked=total >= CENTURY_COMPLETIONS,
            category=AchievementCategory.COMPLETION,
        ),
        Achievement(
            id=3,
            title="Team Spirit",
            description="All members completed habits on the same day",
            icon="🤝",
            progress=1 if team_spirit else 0,
            target=1,
            unlocked=team_spirit,
            category=AchievementCategory.COLLABORATION,
        ),
    ]


def member_trend_series(
    habit: GroupHabit,
    members: Sequence[GroupMember],
    days: Sequence[date],
    window: int = 7
) -> Dict[str, List[float]]:
    """Rolling average of each member's daily values, keyed by member id."""
    return {
        member.id: rolling_average(habit_daily_values(habit, days, member.id), window)
        for member in members
    }


def group_average_series(
    habit: GroupHabit,
    members: Sequence[GroupMember],
    days: Sequence[date]
) -> List[DailyRate]:
    """
    Mean daily value across the members who recorded something that day.

    Days where nobody recorded a value average to 0 with ``has_data`` False.
    """
    maps = [completion_map(habit, member.id) for member in members]
    series = []
    for day in days:
        values = [daily_value(habit, member_values[day]) for member_values in maps if day in member_values]
        series.append(DailyRate(
            date=day,
            rate=sum(values) / len(values) if values else 0.0,
            completed_count=len(values),
            has_data=bool(values),
        ))
    return series


def group_chart_window(
    group: Group,
    anchor: Optional[date] = None,
    narrow: bool = False,
    wide_days: int = CHART_DAYS_WIDE,
    narrow_days: int = CHART_DAYS_NARROW,
) -> List[date]:
    """Chart window bounded by the earliest completion of any group habit."""
    return chart_window(
        group.habits,
        anchor=anchor,
        narrow=narrow,
        wide_days=wide_days,
        narrow_days=narrow_days,
    )


def chart_y_max(habit: GroupHabit, series: Sequence[Sequence[float]]) -> float:
    """Upper bound of the chart's value axis for a habit type.

    Boolean charts are percentages; numeric charts pad the largest value or
    the goal by 10%; rating charts top out at the scale maximum.
    """
    if habit.type == HabitType.RATING:
        return float(habit.config.max)
    if habit.type == HabitType.NUMERIC:
        peak = max([value for values in series for value in values] + [habit.config.goal])
        return float(math.ceil(peak * 1.1))
    return 100.0
