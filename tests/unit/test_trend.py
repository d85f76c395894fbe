"""Unit tests for regression and trend lines."""

from datetime import date

import pytest

from habit_analytics.analyzers.trend import (
    index_points,
    linear_regression,
    rolling_average,
    trend_line,
)
from habit_analytics.models import DailyRate


class TestLinearRegression:
    """Test least-squares fits."""

    def test_exact_line(self):
        """A perfectly linear series is recovered exactly."""
        fit = linear_regression([(0, 0), (1, 2), (2, 4), (3, 6)])
        assert fit.slope == pytest.approx(2.0)
        assert fit.intercept == pytest.approx(0.0)
        assert fit.r_squared == pytest.approx(1.0)
        assert fit.n == 4

    def test_fewer_than_two_points(self):
        """One point has no fit."""
        assert linear_regression([(1, 1)]) is None
        assert linear_regression([]) is None

    def test_vertical_line(self):
        """Identical x values have no fit."""
        assert linear_regression([(2, 1), (2, 5)]) is None

    def test_flat_line_has_no_r_squared(self):
        """Constant y has zero total variance."""
        fit = linear_regression([(0, 3), (1, 3), (2, 3)])
        assert fit.slope == 0
        assert fit.r_squared is None

    def test_noisy_fit(self):
        """Noisy data fits between 0 and 1."""
        fit = linear_regression([(0, 1), (1, 3), (2, 2), (3, 5)])
        assert fit.slope > 0
        assert 0 < fit.r_squared < 1


class TestTrendLine:
    """Test index positioning and fitted lines."""

    def test_index_points_skip_none(self):
        """x is the position in the filtered series."""
        assert index_points([5, None, 7]) == [(0.0, 5.0), (1.0, 7.0)]

    def test_trend_line_values(self):
        """Fitted values at each index."""
        assert trend_line([1, 2, 3]) == pytest.approx([1.0, 2.0, 3.0])

    def test_trend_line_insufficient(self):
        """A single value has no trend line."""
        assert trend_line([None, 4]) is None


class TestRollingAverage:
    """Test has-data-aware rolling averages."""

    def test_ignores_days_without_data(self):
        """Untracked days do not drag the average down."""
        samples = [
            DailyRate(date=date(2024, 1, 1), rate=100.0),
            DailyRate(date=date(2024, 1, 2), rate=0.0, has_data=False),
            DailyRate(date=date(2024, 1, 3), rate=50.0),
        ]
        assert rolling_average(samples) == [100.0, 100.0, 75.0]

    def test_no_data_is_zero(self):
        """A window with no data averages to 0."""
        samples = [DailyRate(date=date(2024, 1, 1), rate=0.0, has_data=False)]
        assert rolling_average(samples) == [0.0]

    def test_window_slides(self):
        """Only the trailing window counts."""
        samples = [DailyRate(date=date(2024, 1, d), rate=float(d)) for d in range(1, 5)]
        assert rolling_average(samples, window=2) == [1.0, 1.5, 2.5, 3.5]
