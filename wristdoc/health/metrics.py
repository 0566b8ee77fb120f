"""
Daily wearable metrics for WristDoc.

Defines the per-day sample, the validated window of consecutive days that
everything downstream consumes, and the sources that produce windows.
Only a synthetic source exists today; a real device feed plugs in by
implementing MetricsSource.
"""

import logging
import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 5

# Uniform sampling ranges for synthetic data (inclusive)
PHYSIOLOGICAL_RANGES = {
    "resting_heart_rate": (80.0, 100.0),  # BPM
    "sleeping_heart_rate": (48.0, 54.0),  # BPM
    "sleep_duration": (6.5, 8.5),  # hours
    "wrist_temperature_variance": (-0.5, 0.5),  # °C from personal baseline
}

_DAY_ABBREVIATIONS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_VALUE_FIELDS = tuple(PHYSIOLOGICAL_RANGES)


class InvalidWindowError(ValueError):
    """Samples do not form a window of consecutive, ascending days."""


@dataclass(frozen=True)
class MetricSample:
    """
    One day of wearable-derived metrics.

    Values are immutable once created; a window is regenerated wholesale
    rather than patched.
    """
    date: date
    resting_heart_rate: float  # BPM
    sleeping_heart_rate: float  # BPM
    sleep_duration: float  # hours
    wrist_temperature_variance: float  # °C, signed deviation from baseline 0

    def __post_init__(self):
        for name in _VALUE_FIELDS:
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be a finite number, got {getattr(self, name)}")
        if self.resting_heart_rate <= 0:
            raise ValueError(f"resting_heart_rate must be positive, got {self.resting_heart_rate}")
        if self.sleeping_heart_rate <= 0:
            raise ValueError(f"sleeping_heart_rate must be positive, got {self.sleeping_heart_rate}")
        if self.sleep_duration < 0:
            raise ValueError(f"sleep_duration must be non-negative, got {self.sleep_duration}")

    @property
    def day_abbreviation(self) -> str:
        """Short English weekday used as a chart axis label (e.g. 'Mon')."""
        return _DAY_ABBREVIATIONS[self.date.weekday()]


class MetricWindow:
    """
    Ordered, gap-free run of daily samples, oldest first.

    Raises InvalidWindowError on construction if the samples are empty,
    out of order, duplicated or skip a day.
    """

    def __init__(self, samples: Sequence[MetricSample]):
        samples = tuple(samples)
        if not samples:
            raise InvalidWindowError("A metric window needs at least one sample")

        for previous, current in zip(samples, samples[1:]):
            if current.date != previous.date + timedelta(days=1):
                raise InvalidWindowError(
                    f"Samples must cover consecutive days: {previous.date} is followed by {current.date}"
                )

        self._samples: Tuple[MetricSample, ...] = samples

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[MetricSample]:
        return iter(self._samples)

    def __getitem__(self, index):
        return self._samples[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, MetricWindow):
            return NotImplemented
        return self._samples == other._samples

    def __hash__(self) -> int:
        return hash(self._samples)

    def __repr__(self) -> str:
        return f"MetricWindow({self.start_date} -> {self.end_date}, {len(self)} days)"

    @property
    def samples(self) -> Tuple[MetricSample, ...]:
        return self._samples

    @property
    def start_date(self) -> date:
        return self._samples[0].date

    @property
    def end_date(self) -> date:
        return self._samples[-1].date

    @property
    def dates(self) -> List[date]:
        return [s.date for s in self._samples]

    def series(self, field_name: str) -> List[float]:
        """
        Values of one metric across the window, oldest first.

        Chart renderers consume these directly.

        Args:
            field_name: One of the keys of PHYSIOLOGICAL_RANGES

        Returns:
            List of values in date order
        """
        if field_name not in PHYSIOLOGICAL_RANGES:
            raise KeyError(f"Unknown metric: {field_name}")
        return [getattr(s, field_name) for s in self._samples]


class MetricsSource(ABC):
    """Abstract producer of metric windows."""

    @abstractmethod
    def generate_window(self, size: int = DEFAULT_WINDOW_DAYS, end_date: Optional[date] = None) -> MetricWindow:
        """
        Produce the window of `size` consecutive days ending at `end_date`.

        Args:
            size: Number of days in the window (>= 1)
            end_date: Last day of the window. Defaults to today.

        Returns:
            MetricWindow ordered oldest first
        """
        pass


class RandomMetricsSource(MetricsSource):
    """
    Synthetic source drawing every field uniformly from PHYSIOLOGICAL_RANGES.

    Stands in for real sensor data. Pass a seeded random.Random for
    reproducible windows.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def generate_window(self, size: int = DEFAULT_WINDOW_DAYS, end_date: Optional[date] = None) -> MetricWindow:
        if size < 1:
            raise ValueError(f"Window size must be at least 1, got {size}")

        end_date = end_date or date.today()
        start_date = end_date - timedelta(days=size - 1)

        samples = [
            self._sample(start_date + timedelta(days=offset))
            for offset in range(size)
        ]
        logger.debug(f"Generated synthetic window {start_date} -> {end_date} ({size} days)")
        return MetricWindow(samples)

    def _sample(self, day: date) -> MetricSample:
        values = {
            name: self._rng.uniform(low, high)
            for name, (low, high) in PHYSIOLOGICAL_RANGES.items()
        }
        return MetricSample(date=day, **values)
