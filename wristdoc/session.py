"""
Report session for WristDoc.

A HealthSession owns everything one user session needs: the metric window
(drawn once at start), the summary state machine, and the summary client.
Requesting a summary schedules the network call on the running event
loop and returns immediately; the completion is threaded back into the
state machine, which drops it if it is no longer the current attempt.

Usage:
    async with HealthSession(GeminiSummaryClient(config)) as session:
        snapshot = await session.generate_summary()
        print(session.report_text())
        result = session.share()
"""

import asyncio
import logging
from datetime import date
from typing import Optional

from wristdoc.adapters.base import BaseSummaryClient, SummaryResult
from wristdoc.errors import SummaryError
from wristdoc.health.metrics import DEFAULT_WINDOW_DAYS, MetricsSource, MetricWindow, RandomMetricsSource
from wristdoc.report_formatter import format_report
from wristdoc.share_encoder import EncodeResult, encode
from wristdoc.summary_state import SummarySnapshot, SummaryState, SummaryStatus

logger = logging.getLogger(__name__)


class HealthSession:
    """One session of the health-report pipeline."""

    def __init__(
        self,
        client: BaseSummaryClient,
        source: Optional[MetricsSource] = None,
        window_days: int = DEFAULT_WINDOW_DAYS,
        end_date: Optional[date] = None,
    ):
        """
        Start a session.

        Args:
            client: Narrative service client (closed with the session)
            source: Where the metric window comes from. Defaults to
                    synthetic sample data.
            window_days: Number of days in the window
            end_date: Last day of the window. Defaults to today.
        """
        self.source = source or RandomMetricsSource()
        self.window: MetricWindow = self.source.generate_window(window_days, end_date)
        self.state = SummaryState()
        self._client = client
        self._task: Optional[asyncio.Task] = None

    @property
    def snapshot(self) -> SummarySnapshot:
        return self.state.snapshot

    @property
    def narrative(self) -> Optional[str]:
        """Current narrative, only while the state is READY."""
        snapshot = self.state.snapshot
        return snapshot.narrative if snapshot.status is SummaryStatus.READY else None

    def request_summary(self) -> Optional[asyncio.Task]:
        """
        Start a narrative request in the background.

        Must be called from a running event loop.

        Returns:
            Task for the new attempt, or None if one is already in flight

        Raises:
            RuntimeError: No event loop is running (state is left unchanged)
        """
        loop = asyncio.get_running_loop()
        generation = self.state.request()
        if generation is None:
            return None
        self._task = loop.create_task(
            self._run(generation), name=f"wristdoc-summary-{generation}"
        )
        return self._task

    async def generate_summary(self) -> SummarySnapshot:
        """Request a narrative (or join the one in flight) and wait for it."""
        task = self.request_summary() or self._task
        if task is not None:
            await task
        return self.state.snapshot

    async def _run(self, generation: int):
        try:
            result = await self._client.request_narrative(self.window)
        except asyncio.CancelledError:
            self.state.cancel(generation)
            raise
        except SummaryError as e:
            result = SummaryResult.fail(e)
        except Exception as e:
            logger.exception(f"Unexpected error from {self._client.name} client")
            result = SummaryResult.fail(SummaryError(f"Unexpected error: {type(e).__name__}"))
        self.state.complete(generation, result)

    def report_text(self) -> str:
        """Shareable report: metrics plus the narrative when READY."""
        return format_report(self.window, self.narrative)

    def share(self) -> EncodeResult:
        """QR code for the current report text."""
        return encode(self.report_text())

    async def close(self):
        """Cancel any in-flight request and release the client."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        # A task cancelled before it started never reaches _run's handler
        self.state.cancel()
        await self._client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
