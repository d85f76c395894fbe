"""Unit tests for day-of-week patterns, diversity, performance and categories."""

from datetime import date

import pytest

from habit_analytics.analyzers.habit_patterns import (
    analyze_categories,
    analyze_time_patterns,
    calculate_goal_progress,
    calculate_habit_diversity,
    calculate_performance_stats,
)
from habit_analytics.models import Habit, HabitType, NumericHabitConfig


class TestTimePatterns:
    """Test weekday pattern detection."""

    def test_most_common_weekday(self):
        """The weekday with most completions wins."""
        # 2024-01-01 is a Monday
        dates = [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 3)]
        pattern = analyze_time_patterns(dates)
        assert pattern.optimal_day == "Mon"
        assert pattern.day_success_rate == 75
        assert pattern.completion_rate == 4  # 4 / 90 rounded
        assert pattern.consistency == "Moderately consistent"

    def test_empty_dates(self):
        """No dates gives the unknown pattern."""
        pattern = analyze_time_patterns([])
        assert pattern.optimal_day == "Unknown"
        assert pattern.day_success_rate == 0

    def test_single_weekday_very_consistent(self):
        """All completions on one weekday is very consistent."""
        pattern = analyze_time_patterns([date(2024, 1, 6), date(2024, 1, 13)])
        assert pattern.optimal_day == "Sat"
        assert pattern.consistency == "Very consistent"


class TestDiversity:
    """Test habit diversity scoring."""

    def test_few_categories(self, reading_habit, water_habit):
        """Two categories score 40."""
        diversity = calculate_habit_diversity([reading_habit, water_habit])
        assert diversity.score == 40
        assert diversity.categories == 2
        assert diversity.recommendation == "Consider adding habits from other life areas"

    def test_some_categories(self, reading_habit, water_habit, mood_habit):
        """Three categories is good variety."""
        diversity = calculate_habit_diversity([reading_habit, water_habit, mood_habit])
        assert diversity.recommendation == "Good variety, room to expand"

    def test_score_capped(self):
        """Six categories cap at 100."""
        habits = [Habit(id=str(i), name=str(i), category=f"c{i}") for i in range(6)]
        diversity = calculate_habit_diversity(habits)
        assert diversity.score == 100
        assert diversity.recommendation == "Excellent habit distribution"

    def test_no_habits(self):
        """No habits has no categories."""
        assert calculate_habit_diversity([]).score == 0


class TestPerformanceStats:
    """Test numeric and rating performance."""

    def test_numeric_higher_is_better(self, water_habit):
        """Best is the maximum value."""
        stats = calculate_performance_stats(water_habit)
        assert stats.average == pytest.approx(7.25)
        assert stats.best == 10
        assert stats.unit == "glasses"
        assert stats.goal_met is False
        assert stats.details == "Best: 10 glasses"
        assert stats.sample_size == 4

    def test_numeric_lower_is_better(self):
        """Best is the minimum value when lower is better."""
        habit = Habit(
            id="h", name="Screen time", type=HabitType.NUMERIC,
            config=NumericHabitConfig(goal=3, unit="h", higher_is_better=False),
            completions={"2024-01-01": 4, "2024-01-02": 2},
        )
        stats = calculate_performance_stats(habit)
        assert stats.best == 2
        assert stats.goal_met is True

    def test_rating(self, mood_habit):
        """Ratings average 4 of 5, which meets the 80% bar."""
        stats = calculate_performance_stats(mood_habit)
        assert stats.average == pytest.approx(4.0)
        assert stats.best == 5
        assert stats.goal_met is True
        assert stats.details == "You're crushing it!"

    def test_boolean_has_no_performance(self, reading_habit):
        """Boolean habits have no performance stats."""
        assert calculate_performance_stats(reading_habit) is None

    def test_numeric_without_entries(self):
        """No numeric entries gives None."""
        habit = Habit(id="h", name="Steps", type=HabitType.NUMERIC, config=NumericHabitConfig(goal=5000))
        assert calculate_performance_stats(habit) is None


class TestCategoriesAndGoals:
    """Test category breakdown and goal progress."""

    def test_category_rates(self, reading_habit, water_habit):
        """Rates cover tracked days per category."""
        stats = {s.category: s for s in analyze_categories([reading_habit, water_habit])}
        assert stats["Learning"].tracked_days == 10
        assert stats["Learning"].completed_days == 9
        assert stats["Health"].completion_rate == pytest.approx(50.0)

    def test_uncategorized(self):
        """Habits without category are grouped together."""
        stats = analyze_categories([Habit(id="h", name="Misc")])
        assert stats[0].category == "Uncategorized"
        assert stats[0].completion_rate == 0.0

    def test_goal_progress(self, reading_habit):
        """90% of tracked days beats the default 80% goal."""
        progress = calculate_goal_progress(reading_habit)
        assert progress.completion_rate == pytest.approx(90.0)
        assert progress.goal_rate == 80
        assert progress.achieved is True

    def test_goal_progress_custom_goal(self, water_habit):
        """Custom goals are respected."""
        assert calculate_goal_progress(water_habit, goal_rate=60).achieved is False
