"""
Summary state machine for WristDoc.

Tracks the lifecycle of narrative requests for one session and is the
single source of truth for what the UI shows in the summary card.

States:
    - IDLE: Nothing requested yet (or the last attempt was cancelled)
    - LOADING: One request in flight
    - READY: Narrative available
    - FAILED: Last attempt failed with a SummaryError

Transitions:
    - IDLE/READY/FAILED -> LOADING: request(); previous payload discarded
    - LOADING -> LOADING: never; request() while loading is ignored
    - LOADING -> READY: complete() with a successful result
    - LOADING -> FAILED: complete() with a failed result
    - LOADING -> IDLE: cancel()

Every attempt gets a generation number. Completions carrying an old
generation are dropped, so a late response can't overwrite a newer one.

Usage:
    state = SummaryState()
    generation = state.request()
    if generation is not None:
        result = await client.request_narrative(window)
        state.complete(generation, result)
    print(state.snapshot.display_text)
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, List, Optional, Tuple

from wristdoc.adapters.base import SummaryResult
from wristdoc.errors import EmptyResultError, SummaryError

logger = logging.getLogger(__name__)

# Most recent statuses kept in SummaryState.history
HISTORY_LIMIT = 100


class SummaryStatus(Enum):
    """Summary lifecycle states."""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class SummarySnapshot:
    """Read-only view of the summary state at one moment."""
    status: SummaryStatus
    narrative: Optional[str] = None
    error: Optional[SummaryError] = None
    generation: int = 0

    @property
    def is_loading(self) -> bool:
        return self.status is SummaryStatus.LOADING

    @property
    def display_text(self) -> str:
        """Text for the summary card in the current state."""
        if self.status is SummaryStatus.READY:
            return self.narrative
        if self.status is SummaryStatus.FAILED:
            return self.error.user_message
        if self.status is SummaryStatus.LOADING:
            return "Generating summary..."
        return ""


Listener = Callable[[SummarySnapshot], None]


class SummaryState:
    """Single-flight state machine for narrative requests."""

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot = SummarySnapshot(status=SummaryStatus.IDLE)
        self._history: Deque[SummaryStatus] = deque([SummaryStatus.IDLE], maxlen=HISTORY_LIMIT)
        self._listeners: List[Listener] = []

    @property
    def snapshot(self) -> SummarySnapshot:
        return self._snapshot

    @property
    def status(self) -> SummaryStatus:
        return self._snapshot.status

    @property
    def generation(self) -> int:
        return self._snapshot.generation

    @property
    def history(self) -> Tuple[SummaryStatus, ...]:
        """Most recent statuses entered, oldest first (at most HISTORY_LIMIT)."""
        return tuple(self._history)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call `listener` with every new snapshot.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def request(self) -> Optional[int]:
        """
        Start a new attempt.

        Returns:
            Generation number of the new attempt, or None if an attempt is
            already in flight (the request is ignored, not queued)
        """
        with self._lock:
            if self._snapshot.status is SummaryStatus.LOADING:
                logger.debug(
                    f"Ignoring summary request: generation {self._snapshot.generation} still loading"
                )
                return None
            generation = self._snapshot.generation + 1
            snapshot = self._enter(SummarySnapshot(status=SummaryStatus.LOADING, generation=generation))

        self._notify(snapshot)
        return generation

    def complete(self, generation: int, result: SummaryResult) -> bool:
        """
        Apply the result of attempt `generation`.

        Returns:
            True if applied, False if the attempt is no longer current
        """
        with self._lock:
            if not self._is_current(generation):
                logger.info(
                    f"Discarding stale summary result for generation {generation} "
                    f"(current: {self._snapshot.generation}, {self._snapshot.status.value})"
                )
                return False

            if result.success and result.narrative and result.narrative.strip():
                new = SummarySnapshot(
                    status=SummaryStatus.READY,
                    narrative=result.narrative,
                    generation=generation,
                )
            else:
                error = result.error or EmptyResultError("Summary result carried no narrative")
                logger.warning(f"Summary generation {generation} failed: {error.__class__.__name__}")
                new = SummarySnapshot(status=SummaryStatus.FAILED, error=error, generation=generation)
            snapshot = self._enter(new)

        self._notify(snapshot)
        return True

    def cancel(self, generation: Optional[int] = None) -> bool:
        """
        Abandon the in-flight attempt and return to IDLE.

        Args:
            generation: Only cancel if this attempt is the current one.
                        None cancels whatever is loading.

        Returns:
            True if an attempt was cancelled
        """
        with self._lock:
            if self._snapshot.status is not SummaryStatus.LOADING:
                return False
            if generation is not None and generation != self._snapshot.generation:
                return False
            logger.info(f"Cancelled summary generation {self._snapshot.generation}")
            snapshot = self._enter(
                SummarySnapshot(status=SummaryStatus.IDLE, generation=self._snapshot.generation)
            )

        self._notify(snapshot)
        return True

    def _is_current(self, generation: int) -> bool:
        return (
            self._snapshot.status is SummaryStatus.LOADING
            and generation == self._snapshot.generation
        )

    def _enter(self, snapshot: SummarySnapshot) -> SummarySnapshot:
        # Caller holds the lock
        self._snapshot = snapshot
        self._history.append(snapshot.status)
        return snapshot

    def _notify(self, snapshot: SummarySnapshot):
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Summary state listener failed: {e}")
