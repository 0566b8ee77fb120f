"""
Test fixtures and mock data for Gemini adapter tests.

Provides canned generateContent responses and helpers for building
httpx mock transports around them.
"""

import json
from typing import Any, Callable, List, Optional

import httpx


def get_mock_gemini_response(text: str = "Patient stable.") -> dict[str, Any]:
    """Successful generateContent body with a single candidate."""
    return {
        "candidates": [
            {
                "content": {
                    "parts": [{"text": text}],
                    "role": "model",
                },
                "finishReason": "STOP",
                "index": 0,
            }
        ],
        "usageMetadata": {
            "promptTokenCount": 212,
            "candidatesTokenCount": 48,
            "totalTokenCount": 260,
        },
        "modelVersion": "gemini-2.5-flash",
    }


def get_mock_error_response(code: int = 500, message: str = "Internal error") -> dict[str, Any]:
    """Error body in the shape the Google APIs return."""
    return {"error": {"code": code, "message": message, "status": "INTERNAL"}}


def make_transport(
    status_code: int = 200,
    body: Any = None,
    raw: Optional[bytes] = None,
    requests: Optional[List[httpx.Request]] = None,
) -> httpx.MockTransport:
    """
    MockTransport answering every request with the same response.

    Args:
        status_code: HTTP status to return
        body: JSON-serializable body (defaults to a successful response)
        raw: Raw bytes body, used instead of `body` when given
        requests: List that receives each request made

    Returns:
        httpx.MockTransport
    """
    if raw is None:
        raw = json.dumps(body if body is not None else get_mock_gemini_response()).encode()

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, content=raw, headers={"Content-Type": "application/json"})

    return httpx.MockTransport(handler)


def make_raising_transport(exc_factory: Callable[[httpx.Request], Exception]) -> httpx.MockTransport:
    """MockTransport whose handler raises the exception built by `exc_factory`."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_factory(request)

    return httpx.MockTransport(handler)
