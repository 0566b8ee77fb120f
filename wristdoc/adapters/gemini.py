"""
Gemini narrative adapter for WristDoc.

Sends the formatted metric window to the Gemini generateContent endpoint
and turns the reply into a SummaryResult. One POST per call, no retries;
every way the call can go wrong maps to a specific SummaryError.
"""

import json
import logging
from typing import Any, Dict, Optional, Union

import httpx

from wristdoc.config import SummaryConfig
from wristdoc.errors import (
    ConfigurationError,
    DecodingError,
    EmptyResultError,
    ProtocolError,
    SummaryError,
    SummaryTimeoutError,
    TransportError,
)
from wristdoc.health.metrics import MetricWindow
from wristdoc.report_formatter import format_prompt_data

from .base import BaseSummaryClient, SummaryResult

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a helpful medical assistant preparing a report for a doctor. "
    "Analyze the following daily health data for a patient and provide a concise, "
    "professional summary written as plain bullet points. Highlight any notable trends, "
    "potential concerns, or patterns in resting heart rate, sleeping heart rate, sleep "
    "duration, and wrist temperature. Do not use markdown emphasis characters such as "
    "asterisks or underscores, and do not begin with conversational filler."
)

CLOSING_DIRECTIVE = (
    "Keep in mind that this summary is going to be printed as it is, so don't start "
    "the review with any phrase like 'Here is your summary' or 'Got it'. Use plain "
    "text only, without any markdown formatting."
)

# Longest slice of an error body kept for logs and error context
_BODY_EXCERPT_CHARS = 200


def build_user_prompt(window: MetricWindow) -> str:
    """Per-day metric lines wrapped with the opening line and closing directive."""
    return (
        f"Here is the patient's health data for the last {len(window)} days:\n"
        f"{format_prompt_data(window)}\n\n"
        f"{CLOSING_DIRECTIVE}"
    )


def build_payload(window: MetricWindow) -> Dict[str, Any]:
    """JSON body for generateContent."""
    return {
        "contents": [{"parts": [{"text": build_user_prompt(window)}]}],
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
    }


def _require(container: Any, key: str, path: str) -> Any:
    if not isinstance(container, dict) or key not in container:
        raise DecodingError(f"Response is missing '{path}'")
    return container[key]


def parse_response(body: Union[bytes, str]) -> str:
    """
    Extract candidates[0].content.parts[0].text from a response body.

    Args:
        body: Raw response body

    Returns:
        The narrative text

    Raises:
        DecodingError: Body is not JSON or does not match the schema
        EmptyResultError: No candidates, no parts, or blank text
    """
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodingError(f"Response is not valid JSON: {e}") from e

    candidates = _require(data, "candidates", "candidates")
    if not isinstance(candidates, list):
        raise DecodingError("'candidates' is not a list")
    if not candidates:
        raise EmptyResultError("Response contains no candidates")

    content = _require(candidates[0], "content", "candidates[0].content")
    parts = _require(content, "parts", "candidates[0].content.parts")
    if not isinstance(parts, list):
        raise DecodingError("'candidates[0].content.parts' is not a list")
    if not parts:
        raise EmptyResultError("First candidate contains no parts")

    text = _require(parts[0], "text", "candidates[0].content.parts[0].text")
    if not isinstance(text, str):
        raise DecodingError("'candidates[0].content.parts[0].text' is not a string")
    if not text.strip():
        raise EmptyResultError("First candidate text is blank")
    return text


class GeminiSummaryClient(BaseSummaryClient):
    """Narrative client for the Gemini generateContent API."""

    def __init__(
        self,
        config: SummaryConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Gemini client.

        Args:
            config: Endpoint, key and timeout settings. Validated on each
                    request, not here.
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def name(self) -> str:
        return "gemini"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def request_narrative(self, window: MetricWindow) -> SummaryResult:
        """Request a narrative for the window. Never raises SummaryError."""
        try:
            self.config.validate_for_request()
        except ConfigurationError as e:
            logger.error(f"Summary request not sent: {e}")
            return SummaryResult.fail(e, client=self.name)

        logger.info(f"Requesting narrative for {len(window)} days ({window.start_date} -> {window.end_date})")

        try:
            client = await self._get_client()
            response = await client.post(
                self.config.endpoint_url,
                params={"key": self.config.api_key},
                json=build_payload(window),
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Summary request timed out after {self.config.timeout_seconds}s")
            return SummaryResult.fail(
                SummaryTimeoutError(f"Request timed out: {type(e).__name__}", self.config.timeout_seconds),
                client=self.name,
            )
        except httpx.RequestError as e:
            # str(e) can include the request URL, which carries the key
            logger.warning(f"Summary request failed: {type(e).__name__}")
            return SummaryResult.fail(
                TransportError(f"Request error: {type(e).__name__}"),
                client=self.name,
            )

        if not response.is_success:
            excerpt = response.text[:_BODY_EXCERPT_CHARS]
            logger.warning(f"Summary service returned HTTP {response.status_code}")
            return SummaryResult.fail(
                ProtocolError(response.status_code, excerpt),
                client=self.name,
            )

        try:
            narrative = parse_response(response.content)
        except SummaryError as e:
            logger.warning(f"Could not read summary response: {e}")
            return SummaryResult.fail(e, client=self.name, status_code=response.status_code)

        logger.info(f"Received narrative ({len(narrative)} chars)")
        return SummaryResult.ok(narrative, client=self.name, status_code=response.status_code)

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
