"""Analyzers for streaks, stability, momentum, correlation, trends, habit patterns and groups."""

from .streaks import (
    analyze_streaks,
    analyze_habit_streaks,
    current_streak_as_of,
    is_streak_alive,
)
from .volatility import (
    calculate_volatility,
    calculate_consistency_score,
    calculate_trend_consistency,
    calculate_burnout_risk,
    rolling_averages,
)
from .momentum import (
    calculate_momentum,
    calculate_weekly_momentum,
    format_momentum,
)
from .correlation import (
    correlate_habits,
    rank_correlations,
    calculate_time_proximity,
    calculate_pair_synergy,
    calculate_habit_synergy,
)
from .trend import (
    linear_regression,
    index_points,
    trend_line,
    rolling_average,
)
from .habit_patterns import (
    analyze_time_patterns,
    calculate_habit_diversity,
    calculate_performance_stats,
    analyze_categories,
    calculate_goal_progress,
)
from .groups import (
    is_date_completed,
    calculate_group_streak,
    calculate_member_streak,
    calculate_group_stats,
    calculate_leaderboard,
    calculate_achievements,
    member_trend_series,
    group_average_series,
    group_chart_window,
    chart_y_max,
)

__all__ = [
    "analyze_streaks",
    "analyze_habit_streaks",
    "current_streak_as_of",
    "is_streak_alive",
    "calculate_volatility",
    "calculate_consistency_score",
    "calculate_trend_consistency",
    "calculate_burnout_risk",
    "rolling_averages",
    "calculate_momentum",
    "calculate_weekly_momentum",
    "format_momentum",
    "correlate_habits",
    "rank_correlations",
    "calculate_time_proximity",
    "calculate_pair_synergy",
    "calculate_habit_synergy",
    "linear_regression",
    "index_points",
    "trend_line",
    "rolling_average",
    "analyze_time_patterns",
    "calculate_habit_diversity",
    "calculate_performance_stats",
    "analyze_categories",
    "calculate_goal_progress",
    "is_date_completed",
    "calculate_group_streak",
    "calculate_member_streak",
    "calculate_group_stats",
    "calculate_leaderboard",
    "calculate_achievements",
    "member_trend_series",
    "group_average_series",
    "group_chart_window",
    "chart_y_max",
]
