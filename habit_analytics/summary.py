"""
Summary pipeline.

Composes the analyzers into the views the dashboard shows: an overview
across every habit, a detailed summary for a single habit and a group page
with its leaderboard, achievements and trend charts. Everything is
recomputed from scratch on each call.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from .analyzers.correlation import calculate_habit_synergy, rank_correlations
from .analyzers.groups import (
    calculate_achievements,
    calculate_group_stats,
    calculate_leaderboard,
    chart_y_max,
    group_average_series,
    group_chart_window,
    member_trend_series,
)
from .analyzers.habit_patterns import (
    analyze_time_patterns,
    calculate_habit_diversity,
    calculate_performance_stats,
)
from .analyzers.momentum import calculate_weekly_momentum
from .analyzers.streaks import analyze_habit_streaks
from .analyzers.volatility import (
    calculate_burnout_risk,
    calculate_consistency_score,
    calculate_volatility,
)
from .config import AnalyticsConfig
from .insight_cache import ALL_HABITS, key_insights_for
from .models import (
    Achievement,
    AnyHabit,
    BurnoutRisk,
    CompletionRate,
    CorrelationResult,
    Group,
    GroupStats,
    HabitDiversity,
    KeyInsight,
    MemberStanding,
    PerformanceStats,
    ServerAnalytics,
    StreakAnalysis,
    SynergyResult,
    TimePattern,
)
from .normalizer import aggregate_daily_rates, habit_daily_rates, satisfied_dates
from .windows import WindowPeriod, build_window, completion_rate

logger = logging.getLogger(__name__)


@dataclass
class OverviewSummary:
    """Analytics across every habit the user tracks."""
    title: str
    habit_count: int
    window_days: int
    consistency_score: int
    weekly_momentum: Optional[float]
    diversity: HabitDiversity
    stability: int
    synergy: SynergyResult
    burnout_risk: BurnoutRisk
    insights: List[KeyInsight] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "habit_count": self.habit_count,
            "window_days": self.window_days,
            "consistency_score": self.consistency_score,
            "weekly_momentum": self.weekly_momentum,
            "diversity": self.diversity.to_dict(),
            "stability": self.stability,
            "synergy": self.synergy.to_dict(),
            "burnout_risk": self.burnout_risk.to_dict(),
            "insights": [i.to_dict() for i in self.insights],
        }


@dataclass
class HabitSummary:
    """Detailed analytics for one habit."""
    title: str
    habit_id: str
    habit_name: str
    streaks: StreakAnalysis
    completion_rates: Dict[str, CompletionRate]
    stability: int
    time_pattern: TimePattern
    performance: Optional[PerformanceStats] = None
    weekly_momentum: Optional[float] = None
    correlations: List[CorrelationResult] = field(default_factory=list)
    insights: List[KeyInsight] = field(default_factory=list)

    @property
    def recovery_rate(self) -> float:
        """Share of streak breaks recovered after a single missed day."""
        return self.streaks.recovery_rate

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "habit_id": self.habit_id,
            "habit_name": self.habit_name,
            "streaks": self.streaks.to_dict(),
            "completion_rates": {k: v.to_dict() for k, v in self.completion_rates.items()},
            "stability": self.stability,
            "best_day": self.time_pattern.to_dict(),
            "recovery_rate": self.recovery_rate,
            "performance": self.performance.to_dict() if self.performance else None,
            "weekly_momentum": self.weekly_momentum,
            "correlations": [c.to_dict() for c in self.correlations],
            "insights": [i.to_dict() for i in self.insights],
        }


@dataclass
class GroupChart:
    """Trend chart series for one group habit."""
    habit_id: str
    habit_name: str
    dates: List[date]
    group_average: List[float]
    member_trends: Dict[str, List[float]]
    y_max: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "habit_id": self.habit_id,
            "habit_name": self.habit_name,
            "dates": [d.isoformat() for d in self.dates],
            "group_average": self.group_average,
            "member_trends": self.member_trends,
            "y_max": self.y_max,
        }


@dataclass
class GroupSummary:
    """Everything shown on a group's page."""
    title: str
    group_id: str
    stats: GroupStats
    leaderboard: List[MemberStanding] = field(default_factory=list)
    achievements: List[Achievement] = field(default_factory=list)
    charts: List[GroupChart] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "group_id": self.group_id,
            "stats": self.stats.to_dict(),
            "leaderboard": [s.to_dict() for s in self.leaderboard],
            "achievements": [a.to_dict() for a in self.achievements],
            "charts": [c.to_dict() for c in self.charts],
        }


def build_overview(
    habits: Sequence[AnyHabit],
    today: Optional[date] = None,
    user_id: Optional[str] = None,
    analytics: Optional[ServerAnalytics] = None,
    config: Optional[AnalyticsConfig] = None
) -> OverviewSummary:
    """
    Overview across all habits.

    Builds the aggregate daily completion rate for the look-back window and
    derives consistency, week-over-week momentum, diversity, stability,
    synergy and burnout risk from it.

    Args:
        habits: Personal and group habits
        today: Reference date (defaults to today)
        user_id: Member to read for group habits
        analytics: Latest server analytics, for key insights
        config: Analytics settings (defaults apply when omitted)

    Returns:
        OverviewSummary
    """
    today = today or date.today()
    config = config or AnalyticsConfig()

    days = build_window(config.lookback_days, today)
    rates = [sample.rate for sample in aggregate_daily_rates(habits, days, user_id)]
    logger.debug("Overview over %d habits and %d days", len(habits), len(days))

    return OverviewSummary(
        title="Advanced Analytics Overview",
        habit_count=len(habits),
        window_days=len(days),
        consistency_score=calculate_consistency_score(rates),
        weekly_momentum=calculate_weekly_momentum(rates),
        diversity=calculate_habit_diversity(habits),
        stability=calculate_volatility(rates, aggregate=True),
        synergy=calculate_habit_synergy(habits, user_id, threshold=config.synergy_threshold),
        burnout_risk=calculate_burnout_risk(rates),
        insights=key_insights_for(analytics, ALL_HABITS),
    )


def build_habit_summary(
    habit: AnyHabit,
    today: Optional[date] = None,
    user_id: Optional[str] = None,
    analytics: Optional[ServerAnalytics] = None,
    config: Optional[AnalyticsConfig] = None,
    habits: Optional[Sequence[AnyHabit]] = None
) -> HabitSummary:
    """
    Detailed summary for a single habit.

    Numeric and rating habits report performance stats in place of
    week-over-week momentum. The current streak follows the staleness rule.

    Args:
        habit: Habit to summarise
        today: Reference date (defaults to today)
        user_id: Member to read for group habits
        analytics: Latest server analytics, for insights and correlation notes
        config: Analytics settings (defaults apply when omitted)
        habits: All habits; when given, correlations against the others are
            included

    Returns:
        HabitSummary
    """
    today = today or date.today()
    config = config or AnalyticsConfig()

    completed = [d for d in satisfied_dates(habit, user_id) if d <= today]
    days = build_window(config.lookback_days, today)
    rates = [sample.rate for sample in habit_daily_rates(habit, days, user_id)]

    performance = calculate_performance_stats(habit, user_id)
    weekly_momentum = None if performance else calculate_weekly_momentum(rates)

    completion_rates = {
        period.value: completion_rate(completed, period, today)
        for period in (WindowPeriod.LIFETIME, WindowPeriod.YEAR, WindowPeriod.TWO_WEEKS)
    }

    correlations: List[CorrelationResult] = []
    if habits:
        correlations = rank_correlations(
            habit,
            habits,
            anchor=today,
            user_id=user_id,
            months=config.correlation_months,
            server_analytics=analytics,
        )

    return HabitSummary(
        title=f"Analytics for {habit.name}",
        habit_id=habit.id,
        habit_name=habit.name,
        streaks=analyze_habit_streaks(habit, today, user_id),
        completion_rates=completion_rates,
        stability=calculate_volatility(rates),
        time_pattern=analyze_time_patterns(completed, config.lookback_days),
        performance=performance,
        weekly_momentum=weekly_momentum,
        correlations=correlations,
        insights=key_insights_for(analytics, habit.name),
    )


def build_group_summary(
    group: Group,
    today: Optional[date] = None,
    config: Optional[AnalyticsConfig] = None,
    narrow: bool = False
) -> GroupSummary:
    """
    Group page: headline stats, leaderboard, achievements and one trend chart
    per group habit.

    Charts end yesterday and cover ``config.chart_days`` days, or
    ``config.chart_days_narrow`` when ``narrow`` is set, never reaching back
    before the group's first completion.

    Args:
        group: Group with habits and members
        today: Reference date (defaults to today)
        config: Analytics settings (defaults apply when omitted)
        narrow: Use the narrow-screen chart window

    Returns:
        GroupSummary
    """
    today = today or date.today()
    config = config or AnalyticsConfig()

    days = group_chart_window(
        group,
        anchor=today,
        narrow=narrow,
        wide_days=config.chart_days,
        narrow_days=config.chart_days_narrow,
    )
    charts = []
    for habit in group.habits:
        average = [sample.rate for sample in group_average_series(habit, group.member_details, days)]
        trends = member_trend_series(habit, group.member_details, days)
        charts.append(GroupChart(
            habit_id=habit.id,
            habit_name=habit.name,
            dates=list(days),
            group_average=average,
            member_trends=trends,
            y_max=chart_y_max(habit, [average, *trends.values()]),
        ))
    logger.debug("Group %s: %d charts over %d days", group.name, len(charts), len(days))

    return GroupSummary(
        title=f"{group.emoji} {group.name}".strip(),
        group_id=group.id,
        stats=calculate_group_stats(group, today),
        leaderboard=calculate_leaderboard(group, today),
        achievements=calculate_achievements(group, today),
        charts=charts,
    )
