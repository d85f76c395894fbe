"""Habit Analytics Engine

Derive streaks, stability, momentum, correlations, trends and group statistics
from habit completion history.
"""

from .models import (
    HabitType,
    CompletionStatus,
    RiskLevel,
    NumericHabitConfig,
    RatingHabitConfig,
    Habit,
    GroupHabit,
    GroupHabitCompletion,
    GroupMember,
    Group,
    CompletionEntry,
    DailyRate,
    StreakAnalysis,
    CorrelationResult,
    SynergyResult,
    RegressionResult,
    BurnoutRisk,
    HabitDiversity,
    CompletionRate,
    TimePattern,
    PerformanceStats,
    CategoryStats,
    GoalProgress,
    GroupStats,
    MemberStanding,
    AchievementCategory,
    Achievement,
    KeyInsight,
    ServerAnalytics,
    habit_from_dict,
    group_from_dict,
    server_analytics_from_dict,
)

from .normalizer import (
    completion_value,
    iter_completions,
    is_satisfied,
    is_close_to_goal,
    completion_status,
    satisfied_dates,
    aggregate_daily_rates,
    habit_daily_rates,
    habit_daily_values,
)

from .windows import (
    WindowPeriod,
    build_window,
    chart_window,
    completion_rate,
    months_back,
)

from .summary import (
    OverviewSummary,
    HabitSummary,
    build_overview,
    build_habit_summary,
    GroupChart,
    GroupSummary,
    build_group_summary,
)

from .store import HabitDataError, HabitRepository, JsonHabitStore
from .insight_cache import InsightCache, key_insights_for, latest_analytics
from .config import AnalyticsConfig, load_config

__all__ = [
    # Models
    "HabitType",
    "CompletionStatus",
    "RiskLevel",
    "NumericHabitConfig",
    "RatingHabitConfig",
    "Habit",
    "GroupHabit",
    "GroupHabitCompletion",
    "GroupMember",
    "Group",
    "CompletionEntry",
    "DailyRate",
    "StreakAnalysis",
    "CorrelationResult",
    "SynergyResult",
    "RegressionResult",
    "BurnoutRisk",
    "HabitDiversity",
    "CompletionRate",
    "TimePattern",
    "PerformanceStats",
    "CategoryStats",
    "GoalProgress",
    "GroupStats",
    "MemberStanding",
    "AchievementCategory",
    "Achievement",
    "KeyInsight",
    "ServerAnalytics",
    "habit_from_dict",
    "group_from_dict",
    "server_analytics_from_dict",
    # Normalizer
    "completion_value",
    "iter_completions",
    "is_satisfied",
    "is_close_to_goal",
    "completion_status",
    "satisfied_dates",
    "aggregate_daily_rates",
    "habit_daily_rates",
    "habit_daily_values",
    # Windows
    "WindowPeriod",
    "build_window",
    "chart_window",
    "completion_rate",
    "months_back",
    # Summaries
    "OverviewSummary",
    "HabitSummary",
    "build_overview",
    "build_habit_summary",
    "GroupChart",
    "GroupSummary",
    "build_group_summary",
    # Data access and settings
    "HabitDataError",
    "HabitRepository",
    "JsonHabitStore",
    "InsightCache",
    "key_insights_for",
    "latest_analytics",
    "AnalyticsConfig",
    "load_config",
]

__version__ = "1.0.0"
