"""
WristDoc Error Handling.

Exception hierarchy for the report pipeline. Summary failures are carried
inside SummaryResult values and end up in the Failed state of the summary
state machine; encode failures are carried inside EncodeResult values.
"""

from typing import Any, Optional


class SummaryError(Exception):
    """
    Base exception for all narrative-generation errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error
        retryable: Whether the user may simply try again
    """

    default_user_message = "Could not generate a summary. Please try again."

    def __init__(
        self,
        message: str,
        context: Optional[dict[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.retryable = retryable

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} Context: {self.context}"
        return self.message

    @property
    def user_message(self) -> str:
        """Message suitable for showing to the user (no internals)."""
        return self.default_user_message

    def to_dict(self) -> dict[str, Any]:
        """
        Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary with error details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "retryable": self.retryable,
        }


class ConfigurationError(SummaryError):
    """Missing or malformed endpoint URL or credential. Never retried."""

    def __init__(self, message: str, setting: Optional[str] = None):
        context = {"setting": setting} if setting else None
        super().__init__(message=message, context=context, retryable=False)
        self.setting = setting

    @property
    def user_message(self) -> str:
        return f"Summary service is not configured: {self.message}"


# Connection and Transport Errors


class TransportError(SummaryError):
    """Network or connection failure. The user may retry."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message=message, context=context, retryable=True)

    @property
    def user_message(self) -> str:
        return "Could not reach the summary service. Check your connection and try again."


class SummaryTimeoutError(TransportError):
    """The summary service didn't respond within the configured timeout."""

    def __init__(self, message: str, timeout_seconds: float):
        super().__init__(message=message, context={"timeout_seconds": timeout_seconds})
        self.timeout_seconds = timeout_seconds

    @property
    def user_message(self) -> str:
        return (
            f"The summary service did not respond within {self.timeout_seconds:g} seconds. "
            "Please try again."
        )


# Response Errors


class ProtocolError(SummaryError):
    """The service answered with a non-2xx HTTP status."""

    def __init__(self, status_code: int, body_excerpt: str = ""):
        context = {"status_code": status_code}
        if body_excerpt:
            context["body"] = body_excerpt
        super().__init__(
            message=f"HTTP {status_code} from summary service",
            context=context,
            retryable=status_code >= 500 or status_code == 429,
        )
        self.status_code = status_code

    @property
    def user_message(self) -> str:
        return f"The summary service returned an error (HTTP {self.status_code})."


class DecodingError(SummaryError):
    """Response body is not valid JSON or does not match the expected schema."""

    @property
    def user_message(self) -> str:
        return "The summary service sent a response that could not be read."


class EmptyResultError(SummaryError):
    """Response parsed but contained no narrative text."""

    @property
    def user_message(self) -> str:
        return "The summary service returned an empty summary. Please try again."


# Optical Code Errors


class EncodeError(Exception):
    """Base exception for optical-code encoding errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PayloadTooLargeError(EncodeError):
    """Report text exceeds the symbol capacity at the chosen error correction."""

    def __init__(self, payload_bytes: int, capacity_bytes: int):
        super().__init__(
            f"Payload of {payload_bytes} bytes exceeds QR capacity of {capacity_bytes} bytes"
        )
        self.payload_bytes = payload_bytes
        self.capacity_bytes = capacity_bytes
