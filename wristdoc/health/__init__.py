"""
WristDoc health data.

Usage:
    from wristdoc.health import RandomMetricsSource

    window = RandomMetricsSource().generate_window(5)
    for sample in window:
        print(sample.day_abbreviation, sample.resting_heart_rate)
"""

from .metrics import (
    DEFAULT_WINDOW_DAYS,
    PHYSIOLOGICAL_RANGES,
    InvalidWindowError,
    MetricSample,
    MetricsSource,
    MetricWindow,
    RandomMetricsSource,
)

__all__ = [
    "DEFAULT_WINDOW_DAYS",
    "PHYSIOLOGICAL_RANGES",
    "InvalidWindowError",
    "MetricSample",
    "MetricsSource",
    "MetricWindow",
    "RandomMetricsSource",
]
