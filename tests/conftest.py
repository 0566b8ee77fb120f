"""
Pytest configuration and shared fixtures for WristDoc tests.
"""

from datetime import date
from pathlib import Path
import sys

import pytest


# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from wristdoc.adapters.base import BaseSummaryClient, SummaryResult  # noqa: E402
from wristdoc.config import SummaryConfig  # noqa: E402
from wristdoc.health.metrics import MetricSample, MetricWindow  # noqa: E402


@pytest.fixture
def project_root_path():
    """Return the project root directory path."""
    return project_root


@pytest.fixture
def new_year_sample():
    """Single day used by the end-to-end report example."""
    return MetricSample(
        date=date(2024, 1, 1),
        resting_heart_rate=85,
        sleeping_heart_rate=50,
        sleep_duration=7.5,
        wrist_temperature_variance=-0.10,
    )


@pytest.fixture
def one_day_window(new_year_sample):
    """MetricWindow holding only 2024-01-01."""
    return MetricWindow([new_year_sample])


@pytest.fixture
def five_day_window():
    """Deterministic five day window, 2024-03-01 to 2024-03-05."""
    return MetricWindow([
        MetricSample(date(2024, 3, 1), 82.4, 49.6, 7.04, 0.12),
        MetricSample(date(2024, 3, 2), 91.5, 51.2, 6.55, -0.31),
        MetricSample(date(2024, 3, 3), 88.0, 52.9, 8.25, 0.005),
        MetricSample(date(2024, 3, 4), 99.6, 48.1, 7.95, -0.5),
        MetricSample(date(2024, 3, 5), 80.2, 53.5, 6.5, 0.46),
    ])


@pytest.fixture
def summary_config():
    """Valid config pointing at a fake endpoint."""
    return SummaryConfig(
        endpoint_url="https://llm.example.test/v1beta/models/test-model:generateContent",
        api_key="test_api_key_12345",
        timeout_seconds=5.0,
    )


@pytest.fixture
def mock_summary_client(mocker):
    """Mock summary client that answers with a fixed narrative."""
    mock_client = mocker.AsyncMock(spec=BaseSummaryClient)
    mock_client.name = "mock"
    mock_client.request_narrative.return_value = SummaryResult.ok("Patient stable.")
    return mock_client
