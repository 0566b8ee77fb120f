#!/usr/bin/env python3
"""
Unit tests for wristdoc/health/metrics.py

Covers sample validation, the window invariant (consecutive ascending
days) and the synthetic metrics source.
"""

import random
from datetime import date, timedelta

import pytest

from wristdoc.health.metrics import (
    PHYSIOLOGICAL_RANGES,
    InvalidWindowError,
    MetricSample,
    MetricWindow,
    RandomMetricsSource,
)


def make_sample(day: date, **overrides) -> MetricSample:
    values = {
        "resting_heart_rate": 90.0,
        "sleeping_heart_rate": 50.0,
        "sleep_duration": 7.5,
        "wrist_temperature_variance": 0.0,
    }
    values.update(overrides)
    return MetricSample(date=day, **values)


# ========================================================================
# MetricSample
# ========================================================================

class TestMetricSample:
    """Test MetricSample validation and helpers"""

    def test_sample_is_immutable(self):
        """Test samples cannot be modified after creation"""
        sample = make_sample(date(2024, 1, 1))
        with pytest.raises(AttributeError):
            sample.resting_heart_rate = 70.0

    @pytest.mark.parametrize("field_name", ["resting_heart_rate", "sleeping_heart_rate"])
    def test_non_positive_heart_rate_rejected(self, field_name):
        """Test heart rates must be positive"""
        with pytest.raises(ValueError, match=field_name):
            make_sample(date(2024, 1, 1), **{field_name: 0})

    def test_negative_sleep_rejected(self):
        """Test sleep duration can't be negative"""
        with pytest.raises(ValueError, match="sleep_duration"):
            make_sample(date(2024, 1, 1), sleep_duration=-0.1)

    @pytest.mark.parametrize("field_name", [
        "resting_heart_rate",
        "sleeping_heart_rate",
        "sleep_duration",
        "wrist_temperature_variance",
    ])
    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_values_rejected(self, field_name, value):
        """Test NaN and infinities never reach the report"""
        with pytest.raises(ValueError, match=f"{field_name} must be a finite number"):
            make_sample(date(2024, 1, 1), **{field_name: value})

    def test_zero_sleep_allowed(self):
        """Test zero hours of sleep is a valid measurement"""
        assert make_sample(date(2024, 1, 1), sleep_duration=0).sleep_duration == 0

    def test_negative_temperature_variance_allowed(self):
        """Test temperature variance is signed"""
        sample = make_sample(date(2024, 1, 1), wrist_temperature_variance=-0.4)
        assert sample.wrist_temperature_variance == -0.4

    def test_day_abbreviation(self):
        """Test weekday abbreviation used for chart labels"""
        assert make_sample(date(2024, 1, 1)).day_abbreviation == "Mon"
        assert make_sample(date(2024, 1, 7)).day_abbreviation == "Sun"


# ========================================================================
# MetricWindow
# ========================================================================

class TestMetricWindow:
    """Test the consecutive-days invariant"""

    def test_valid_window(self):
        """Test consecutive days build a window"""
        start = date(2024, 2, 27)
        window = MetricWindow([make_sample(start + timedelta(days=i)) for i in range(4)])

        assert len(window) == 4
        assert window.start_date == date(2024, 2, 27)
        assert window.end_date == date(2024, 3, 1)  # crosses leap day
        assert window.dates == [date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]

    def test_empty_window_rejected(self):
        """Test a window needs at least one sample"""
        with pytest.raises(InvalidWindowError):
            MetricWindow([])

    def test_gap_rejected(self):
        """Test a missing day is rejected"""
        with pytest.raises(InvalidWindowError, match="consecutive"):
            MetricWindow([make_sample(date(2024, 1, 1)), make_sample(date(2024, 1, 3))])

    def test_duplicate_rejected(self):
        """Test the same day twice is rejected"""
        with pytest.raises(InvalidWindowError):
            MetricWindow([make_sample(date(2024, 1, 1)), make_sample(date(2024, 1, 1))])

    def test_descending_rejected(self):
        """Test newest-first ordering is rejected"""
        with pytest.raises(InvalidWindowError):
            MetricWindow([make_sample(date(2024, 1, 2)), make_sample(date(2024, 1, 1))])

    def test_invalid_window_error_is_value_error(self):
        """Test callers can catch ValueError"""
        assert issubclass(InvalidWindowError, ValueError)

    def test_window_is_a_read_only_sequence(self, five_day_window):
        """Test indexing and iteration, no item assignment"""
        assert five_day_window[0].date == date(2024, 3, 1)
        assert five_day_window[-1].date == date(2024, 3, 5)
        assert [s.date.day for s in five_day_window] == [1, 2, 3, 4, 5]
        with pytest.raises(TypeError):
            five_day_window[0] = five_day_window[1]

    def test_window_equality(self, five_day_window):
        """Test windows compare by their samples"""
        assert MetricWindow(five_day_window.samples) == five_day_window

    def test_series(self, five_day_window):
        """Test per-metric series in date order"""
        assert five_day_window.series("resting_heart_rate") == [82.4, 91.5, 88.0, 99.6, 80.2]

    def test_series_unknown_metric(self, five_day_window):
        """Test unknown metric names raise KeyError"""
        with pytest.raises(KeyError):
            five_day_window.series("steps")


# ========================================================================
# RandomMetricsSource
# ========================================================================

class TestRandomMetricsSource:
    """Test synthetic window generation"""

    @pytest.mark.parametrize("size", [1, 2, 5, 14, 30])
    def test_dates_are_consecutive_and_end_at_end_date(self, size):
        """Test the date sequence regardless of the random values"""
        end = date(2024, 3, 2)
        window = RandomMetricsSource().generate_window(size, end_date=end)

        assert len(window) == size
        assert window.end_date == end
        assert window.start_date == end - timedelta(days=size - 1)
        for previous, current in zip(window.dates, window.dates[1:]):
            assert current - previous == timedelta(days=1)

    def test_end_date_defaults_to_today(self):
        """Test the window ends today when no end date is given"""
        window = RandomMetricsSource().generate_window(5)
        assert window.end_date == date.today()

    def test_values_within_ranges(self):
        """Test every field stays inside its physiological range"""
        window = RandomMetricsSource(random.Random(7)).generate_window(50, end_date=date(2024, 6, 30))
        for field_name, (low, high) in PHYSIOLOGICAL_RANGES.items():
            for value in window.series(field_name):
                assert low <= value <= high, f"{field_name}={value} outside [{low}, {high}]"

    def test_seeded_rng_is_reproducible(self):
        """Test the same seed gives the same window"""
        end = date(2024, 1, 10)
        first = RandomMetricsSource(random.Random(42)).generate_window(5, end_date=end)
        second = RandomMetricsSource(random.Random(42)).generate_window(5, end_date=end)
        assert first == second

    @pytest.mark.parametrize("size", [0, -3])
    def test_invalid_size_rejected(self, size):
        """Test window sizes below one are rejected"""
        with pytest.raises(ValueError, match="at least 1"):
            RandomMetricsSource().generate_window(size)
