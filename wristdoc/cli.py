#!/usr/bin/env python3
"""
WristDoc CLI - health summary reports from wearable metrics.

Usage:
    # Show the last 5 days of metrics
    wristdoc metrics

    # Full report with AI summary, QR code saved to report.png
    wristdoc report --qr report.png

    # Metrics-only report for a 7 day window
    wristdoc report --days 7 --no-summary

Settings (environment or .env):
    GEMINI_API_KEY             API key for the summary service
    WRISTDOC_ENDPOINT_URL      generateContent endpoint override
    WRISTDOC_REQUEST_TIMEOUT   Request timeout in seconds (default 30)
    WRISTDOC_WINDOW_DAYS       Default window size (default 5)
    WRISTDOC_LOG_LEVEL         Logging level (default INFO)
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from rich.box import ROUNDED
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from wristdoc.adapters.base import BaseSummaryClient
from wristdoc.adapters.gemini import GeminiSummaryClient
from wristdoc.config import SummaryConfig, load_config
from wristdoc.errors import ConfigurationError
from wristdoc.health.metrics import MetricWindow, RandomMetricsSource
from wristdoc.report_formatter import (
    format_heart_rate,
    format_sleep_hours,
    format_temperature_variance,
)
from wristdoc.session import HealthSession
from wristdoc.share_encoder import encode_to_png
from wristdoc.summary_state import SummaryStatus

EXIT_OK = 0
EXIT_SUMMARY_FAILED = 1
EXIT_CONFIG_ERROR = 2

console = Console()


def build_client(config: SummaryConfig) -> BaseSummaryClient:
    """Summary client used by the report command."""
    return GeminiSummaryClient(config)


def metrics_table(window: MetricWindow) -> Table:
    """Rich table of the window, one row per day."""
    table = Table(title=f"Last {len(window)} Days", box=ROUNDED)
    table.add_column("Day", style="bold")
    table.add_column("Date")
    table.add_column("Resting HR", justify="right")
    table.add_column("Sleeping HR", justify="right")
    table.add_column("Sleep", justify="right")
    table.add_column("Temp Variance", justify="right")

    for sample in window:
        variance = sample.wrist_temperature_variance
        table.add_row(
            sample.day_abbreviation,
            sample.date.isoformat(),
            f"{format_heart_rate(sample.resting_heart_rate)} BPM",
            f"{format_heart_rate(sample.sleeping_heart_rate)} BPM",
            f"{format_sleep_hours(sample.sleep_duration)} hr",
            f"[{'orange3' if variance > 0 else 'cyan'}]{format_temperature_variance(variance)}°C[/]",
        )
    return table


async def run_report(config: SummaryConfig, days: int, with_summary: bool, qr_path: Optional[str]) -> int:
    """Build the report, print it, and optionally write the QR code."""
    exit_code = EXIT_OK

    async with HealthSession(build_client(config), window_days=days) as session:
        if with_summary:
            with console.status("[magenta]Generating doctor's summary...", spinner="dots"):
                snapshot = await session.generate_summary()
            if snapshot.status is SummaryStatus.FAILED:
                console.print(f"[red]✗ {escape(snapshot.display_text)}[/red]")
                exit_code = EXIT_SUMMARY_FAILED

        console.print(Panel(Text(session.report_text()), title="Health Report", box=ROUNDED, expand=False))

        if qr_path:
            result = encode_to_png(session.report_text(), qr_path)
            if result.success:
                console.print(f"[green]✓ QR code (version {result.version}) saved to {qr_path}[/green]")
            else:
                console.print(f"[yellow]⚠ QR code unavailable: {result.error.message}[/yellow]")

    return exit_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wristdoc", description="WristDoc health summary reports")
    subparsers = parser.add_subparsers(dest="command")

    metrics_parser = subparsers.add_parser("metrics", help="Show the metric window")
    metrics_parser.add_argument("--days", type=int, help="Days in the window")

    report_parser = subparsers.add_parser("report", help="Print the health report")
    report_parser.add_argument("--days", type=int, help="Days in the window")
    report_parser.add_argument("--no-summary", action="store_true", help="Skip the AI summary")
    report_parser.add_argument("--qr", metavar="PATH", help="Write the report QR code to PATH (PNG)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {escape(e.message)}[/red]")
        return EXIT_CONFIG_ERROR

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    days = args.days if args.days is not None else config.window_days
    if days < 1:
        parser.error("--days must be at least 1")

    if args.command == "metrics":
        console.print(metrics_table(RandomMetricsSource().generate_window(days)))
        return EXIT_OK

    return asyncio.run(run_report(config, days, not args.no_summary, args.qr))


if __name__ == "__main__":
    sys.exit(main())
