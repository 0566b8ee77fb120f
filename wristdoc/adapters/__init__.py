"""
WristDoc Summary Adapters

Clients for external narrative-generation services. Each returns a
SummaryResult rather than raising, so callers can feed the outcome
straight into the summary state machine.

Usage:
    from wristdoc.adapters import GeminiSummaryClient
    from wristdoc.config import load_config

    async def main(window):
        async with GeminiSummaryClient(load_config()) as client:
            result = await client.request_narrative(window)
            if result.success:
                print(result.narrative)
            else:
                print(result.error.user_message)
"""

from .base import BaseSummaryClient, SummaryResult
from .gemini import GeminiSummaryClient

__all__ = [
    "BaseSummaryClient",
    "GeminiSummaryClient",
    "SummaryResult",
]
