"""
Base summary client interface for WristDoc.

Provides the abstract base class for narrative services and the result
type they return instead of raising.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from wristdoc.errors import SummaryError
from wristdoc.health.metrics import MetricWindow


def _stamped(metadata: dict[str, Any]) -> dict[str, Any]:
    return {"timestamp": datetime.now(timezone.utc).isoformat(), **metadata}


@dataclass(frozen=True)
class SummaryResult:
    """
    Outcome of one narrative request: the text, or a typed failure.

    Exactly one of `narrative` and `error` is set. `metadata` carries the
    creation timestamp plus whatever the client adds (client name, HTTP
    status).
    """

    success: bool
    narrative: Optional[str] = None
    error: Optional[SummaryError] = None
    metadata: dict[str, Any] = field(default_factory=lambda: _stamped({}))

    @classmethod
    def ok(cls, narrative: str, **metadata) -> "SummaryResult":
        return cls(success=True, narrative=narrative, metadata=_stamped(metadata))

    @classmethod
    def fail(cls, error: SummaryError, **metadata) -> "SummaryResult":
        return cls(success=False, error=error, metadata=_stamped(metadata))

    @property
    def error_message(self) -> Optional[str]:
        """User-facing text of the failure, None on success."""
        return self.error.user_message if self.error else None

    def raise_for_error(self) -> str:
        """
        Unwrap the narrative.

        Raises:
            SummaryError: The failure this result carries
        """
        if self.error is not None:
            raise self.error
        return self.narrative

    def to_dict(self) -> dict[str, Any]:
        """Log-friendly form; errors are expanded via SummaryError.to_dict."""
        return {
            "success": self.success,
            "narrative_chars": len(self.narrative) if self.narrative else 0,
            "error": self.error.to_dict() if self.error else None,
            "metadata": self.metadata,
        }


class BaseSummaryClient(ABC):
    """Abstract base class for narrative-generation services."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Client identifier used in logs."""
        pass

    @abstractmethod
    async def request_narrative(self, window: MetricWindow) -> SummaryResult:
        """
        Ask the service for a clinician-facing narrative of the window.

        Makes exactly one round trip and never retries. Failures come back
        as SummaryResult.fail rather than exceptions.

        Args:
            window: Metric window to summarize

        Returns:
            SummaryResult with the narrative text or a SummaryError
        """
        pass

    async def close(self):
        """Release network resources. Stateless clients have nothing to do."""
        return None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
