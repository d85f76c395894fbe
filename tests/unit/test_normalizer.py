"""Unit tests for the completion normalizer."""

from datetime import date

import pytest

from habit_analytics.models import (
    CompletionStatus,
    GroupHabit,
    GroupHabitCompletion,
    Habit,
    HabitType,
    NumericHabitConfig,
)
from habit_analytics.normalizer import (
    aggregate_daily_rates,
    completion_map,
    completion_status,
    completion_value,
    earliest_completion_date,
    habit_daily_rates,
    habit_daily_values,
    is_close_to_goal,
    is_satisfied,
    iter_completions,
    satisfied_dates,
    tracked_dates,
)


# ============================================================================
# Completion lookup
# ============================================================================

class TestCompletionValue:
    """Test per-day value extraction for both habit shapes."""

    def test_personal_habit_value(self, reading_habit):
        """Personal habits read the date map."""
        assert completion_value(reading_habit, date(2024, 1, 1)) is True
        assert completion_value(reading_habit, date(2024, 1, 6)) is False

    def test_untracked_day_is_none(self, reading_habit):
        """Missing dates are None, not False."""
        assert completion_value(reading_habit, date(2023, 12, 31)) is None

    def test_personal_key_with_time_suffix(self):
        """Personal keys carrying a time are found by their date."""
        habit = Habit(id="h", name="Walk", completions={"2024-01-03T08:15:00Z": True})
        assert completion_value(habit, date(2024, 1, 3)) is True
        assert completion_value(habit, date(2024, 1, 3)) == completion_map(habit)[date(2024, 1, 3)]

    def test_group_habit_member_lookup(self, running_group):
        """Group habits read the member's record and ignore time suffixes."""
        habit = running_group.habits[0]
        assert completion_value(habit, date(2024, 1, 8), "u2") is True
        assert completion_value(habit, date(2024, 1, 7), "u2") is None
        assert completion_value(habit, date(2024, 1, 7), "u1") is True

    def test_group_duplicates_last_record_wins(self):
        """Duplicate (user, date) records keep the last value."""
        habit = GroupHabit(id="g", name="Stretch", completions=[
            GroupHabitCompletion(user_id="u1", date="2024-01-01", completed=True),
            GroupHabitCompletion(user_id="u1", date="2024-01-01T20:00:00", completed=False),
        ])
        assert completion_value(habit, date(2024, 1, 1), "u1") is False

    def test_group_without_user_uses_first_member(self):
        """With no user the first member's record for the date is used."""
        habit = GroupHabit(id="g", name="Stretch", completions=[
            GroupHabitCompletion(user_id="u1", date="2024-01-01", completed=False),
            GroupHabitCompletion(user_id="u2", date="2024-01-01", completed=True),
        ])
        assert completion_value(habit, date(2024, 1, 1)) is False

    def test_iter_completions_sorted(self):
        """The uniform adapter returns date-sorted entries."""
        habit = Habit(id="h", name="Walk", completions={"2024-01-03": True, "2024-01-01": False})
        entries = iter_completions(habit)
        assert [e.date for e in entries] == [date(2024, 1, 1), date(2024, 1, 3)]
        assert entries[0].value is False


# ============================================================================
# Satisfaction predicate
# ============================================================================

class TestIsSatisfied:
    """Test the goal satisfaction predicate."""

    def test_boolean_requires_true(self, reading_habit):
        """Boolean habits need exactly True."""
        assert is_satisfied(reading_habit, True)
        assert not is_satisfied(reading_habit, False)
        assert not is_satisfied(reading_habit, 1)
        assert not is_satisfied(reading_habit, None)

    def test_numeric_higher_is_better(self, water_habit):
        """Numeric habits compare against the goal."""
        assert is_satisfied(water_habit, 8)
        assert is_satisfied(water_habit, 9.5)
        assert not is_satisfied(water_habit, 7)

    def test_numeric_lower_is_better(self):
        """Lower-is-better goals invert the comparison."""
        habit = Habit(
            id="h", name="Coffee", type=HabitType.NUMERIC,
            config=NumericHabitConfig(goal=2, higher_is_better=False),
        )
        assert is_satisfied(habit, 2)
        assert is_satisfied(habit, 0)
        assert not is_satisfied(habit, 3)

    def test_numeric_rejects_non_numbers(self, water_habit):
        """Booleans are not numeric values."""
        assert not is_satisfied(water_habit, True)

    def test_rating_exact_match(self, mood_habit):
        """Rating habits need the exact goal."""
        assert is_satisfied(mood_habit, 4)
        assert not is_satisfied(mood_habit, 5)
        assert not is_satisfied(mood_habit, 3)

    def test_rating_close_to_goal(self, mood_habit):
        """Close means within one point of the goal."""
        assert is_close_to_goal(mood_habit, 5)
        assert is_close_to_goal(mood_habit, 3)
        assert not is_close_to_goal(mood_habit, 2)

    def test_close_to_goal_only_for_ratings(self, water_habit):
        """Non-rating habits are never close."""
        assert not is_close_to_goal(water_habit, 7)


class TestCompletionStatus:
    """Test complete/partial/incomplete classification."""

    @pytest.mark.parametrize("value,expected", [
        (None, CompletionStatus.UNTRACKED),
        (8, CompletionStatus.COMPLETE),
        (6, CompletionStatus.PARTIAL),
        (5, CompletionStatus.INCOMPLETE),
    ])
    def test_numeric_status(self, water_habit, value, expected):
        """Numeric partial starts at 70% of the goal."""
        assert completion_status(water_habit, value) == expected

    def test_rating_partial(self, mood_habit):
        """Ratings one point off the goal are partial."""
        assert completion_status(mood_habit, 3) == CompletionStatus.PARTIAL
        assert completion_status(mood_habit, 1) == CompletionStatus.INCOMPLETE


# ============================================================================
# Date helpers and rate series
# ============================================================================

class TestDateHelpers:
    """Test satisfied/tracked dates and earliest completion."""

    def test_satisfied_dates_skip_failures(self, reading_habit):
        """Failed days are tracked but not satisfied."""
        done = satisfied_dates(reading_habit)
        assert date(2024, 1, 6) not in done
        assert len(done) == 9
        assert date(2024, 1, 6) in tracked_dates(reading_habit)

    def test_numeric_satisfied_dates(self, water_habit):
        """Only days meeting the goal count."""
        assert satisfied_dates(water_habit) == [date(2024, 1, 1), date(2024, 1, 3)]

    def test_earliest_completion(self, reading_habit, running_group):
        """Earliest date across habits."""
        habits = [running_group.habits[0], reading_habit]
        assert earliest_completion_date(habits) == date(2024, 1, 1)

    def test_earliest_completion_empty(self):
        """No records means no earliest date."""
        assert earliest_completion_date([Habit(id="h", name="New")]) is None


class TestDailyRates:
    """Test daily rate series."""

    def test_aggregate_rates(self, reading_habit, water_habit):
        """Share of habits satisfied each day."""
        days = [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 6)]
        rates = aggregate_daily_rates([reading_habit, water_habit], days)
        assert [r.rate for r in rates] == [100.0, 50.0, 0.0]
        assert rates[1].completed_count == 1

    def test_aggregate_rates_no_habits(self):
        """No habits yields zero rates, not an error."""
        rates = aggregate_daily_rates([], [date(2024, 1, 1)])
        assert rates[0].rate == 0.0

    def test_habit_daily_rates_has_data(self, reading_habit):
        """Untracked days carry has_data False."""
        rates = habit_daily_rates(reading_habit, [date(2024, 1, 6), date(2024, 1, 11)])
        assert [r.rate for r in rates] == [0.0, 0.0]
        assert [r.has_data for r in rates] == [True, False]

    def test_habit_daily_values_raw_numbers(self, water_habit):
        """Numeric habits keep their raw values."""
        values = habit_daily_values(water_habit, [date(2024, 1, 2), date(2024, 1, 5)])
        assert values[0].rate == 6.0
        assert values[1].rate == 0.0
        assert values[1].has_data is False
