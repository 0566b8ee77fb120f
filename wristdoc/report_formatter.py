"""
Plain-text report formatting for WristDoc.

The same per-day block is used for the on-screen report and for the
prompt sent to the summary service, so both always agree. Output does not
depend on the process locale.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from wristdoc.health.metrics import MetricSample, MetricWindow

REPORT_TITLE = "Health Summary Report"
SUMMARY_TITLE = "AI-Generated Summary"
RULE = "-" * 21

_WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
_MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _round_half_up(value: float, places: int) -> Decimal:
    # repr() gives the shortest decimal string, so 7.25 stays 7.25 rather than 7.2499...
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)
    return rounded


def format_heart_rate(bpm: float) -> str:
    """Heart rate with no decimals: 86.7 -> '87'."""
    return f"{_round_half_up(bpm, 0):f}"


def format_sleep_hours(hours: float) -> str:
    """Sleep duration with one decimal: 7.25 -> '7.3'."""
    return f"{_round_half_up(hours, 1):f}"


def format_temperature_variance(celsius: float) -> str:
    """Signed variance with two decimals: 0.3 -> '+0.30', -0.07 -> '-0.07'."""
    return f"{_round_half_up(celsius, 2):+f}"


def format_day_label(sample: MetricSample) -> str:
    """'Monday, Jan 1' style label for a sample's date."""
    day = sample.date
    return f"{_WEEKDAY_NAMES[day.weekday()]}, {_MONTH_ABBREVIATIONS[day.month - 1]} {day.day}"


def format_day(sample: MetricSample) -> List[str]:
    """The lines of one day block (label plus four metric lines)."""
    return [
        f"{format_day_label(sample)}:",
        f"  - Resting HR: {format_heart_rate(sample.resting_heart_rate)} BPM",
        f"  - Sleeping HR: {format_heart_rate(sample.sleeping_heart_rate)} BPM",
        f"  - Sleep: {format_sleep_hours(sample.sleep_duration)} hours",
        f"  - Temp Variance: {format_temperature_variance(sample.wrist_temperature_variance)}°C",
    ]


def format_metrics(window: MetricWindow) -> str:
    """All day blocks, oldest first, separated by blank lines."""
    return "\n\n".join("\n".join(format_day(sample)) for sample in window)


def format_prompt_data(window: MetricWindow) -> str:
    """Day blocks for the summary prompt, without report header or footer."""
    return format_metrics(window)


def format_report(window: MetricWindow, narrative: Optional[str] = None) -> str:
    """
    Render the shareable plain-text report.

    Args:
        window: Metric window to render
        narrative: AI summary text. The summary section is left out
                   entirely when this is None or blank.

    Returns:
        Report text
    """
    report = f"{REPORT_TITLE}\n{RULE}\n\n{format_metrics(window)}\n"
    if narrative and narrative.strip():
        report += f"\n{SUMMARY_TITLE}\n{RULE}\n{narrative}"
    return report
