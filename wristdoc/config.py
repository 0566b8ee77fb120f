"""
Configuration for WristDoc.

Settings come from the process environment, optionally seeded from a .env
file, and are validated by a pydantic model. The API key is read here but
only checked when a summary is requested, so the metrics and report views
work without one.

Usage:
    from wristdoc.config import load_config

    config = load_config()         # raises ConfigurationError
    config.validate_for_request()  # raises ConfigurationError
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

import httpx
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wristdoc.errors import ConfigurationError
from wristdoc.health.metrics import DEFAULT_WINDOW_DAYS

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"
)
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_LOG_LEVEL = "INFO"

ENV_API_KEY = "GEMINI_API_KEY"
ENV_ENDPOINT_URL = "WRISTDOC_ENDPOINT_URL"
ENV_REQUEST_TIMEOUT = "WRISTDOC_REQUEST_TIMEOUT"
ENV_WINDOW_DAYS = "WRISTDOC_WINDOW_DAYS"
ENV_LOG_LEVEL = "WRISTDOC_LOG_LEVEL"

# Model field -> environment variable it is read from
_FIELD_SETTINGS = {
    "endpoint_url": ENV_ENDPOINT_URL,
    "api_key": ENV_API_KEY,
    "timeout_seconds": ENV_REQUEST_TIMEOUT,
    "window_days": ENV_WINDOW_DAYS,
    "log_level": ENV_LOG_LEVEL,
}


def _check_endpoint(url: str) -> str:
    """Return the stripped URL, or raise ValueError unless it is absolute https."""
    url = (url or "").strip()
    if not url:
        raise ValueError("Endpoint URL is empty")
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ValueError(f"Endpoint URL is malformed: {e}") from e
    if parsed.scheme != "https" or not parsed.host:
        raise ValueError("Endpoint URL must be an absolute https URL")
    return url


class SummaryConfig(BaseModel):
    """Settings for the summary pipeline."""

    model_config = ConfigDict(frozen=True)

    endpoint_url: str = Field(
        default=DEFAULT_ENDPOINT_URL, description="generateContent endpoint (https)"
    )
    api_key: Optional[str] = Field(
        default=None, description="Summary service API key, required at call time"
    )
    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        allow_inf_nan=False,
        description="Request timeout in seconds",
    )
    window_days: int = Field(
        default=DEFAULT_WINDOW_DAYS, ge=1, description="Days in the metric window"
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level name")

    @field_validator("endpoint_url")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        return _check_endpoint(v)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    def validate_for_request(self) -> None:
        """
        Check the endpoint and credential before a request is made.

        Raises:
            ConfigurationError: If the key is missing/blank or the endpoint
                                is not an absolute https URL
        """
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError(f"{ENV_API_KEY} is not set", setting=ENV_API_KEY)

        # Copies made with model_copy(update=...) skip field validation
        try:
            _check_endpoint(self.endpoint_url)
        except ValueError as e:
            raise ConfigurationError(str(e), setting=ENV_ENDPOINT_URL) from e

    @property
    def masked_api_key(self) -> str:
        """API key safe for display, e.g. 'AIza...9xQk'."""
        if not self.api_key:
            return "<not set>"
        if len(self.api_key) <= 8:
            return "*" * len(self.api_key)
        return f"{self.api_key[:4]}...{self.api_key[-4:]}"


def _configuration_error(error: ValidationError) -> ConfigurationError:
    """First pydantic error, reported against the environment variable name."""
    first = error.errors()[0]
    field_name = first["loc"][0] if first["loc"] else None
    setting = _FIELD_SETTINGS.get(field_name, field_name)
    return ConfigurationError(f"{setting} is invalid: {first['msg']}", setting=setting)


def load_config(
    env_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SummaryConfig:
    """
    Build a SummaryConfig from the environment.

    Unset or blank variables fall back to the model defaults; numeric
    strings are coerced by pydantic.

    Args:
        env_path: Optional .env file. When omitted, python-dotenv searches
                  upward from the working directory.
        environ: Mapping to read instead of os.environ (skips .env loading)

    Returns:
        SummaryConfig

    Raises:
        ConfigurationError: If a setting is malformed or out of range
    """
    if environ is None:
        if env_path is not None:
            load_dotenv(env_path)
        else:
            load_dotenv()
        environ = os.environ

    values = {}
    for field_name, env_name in _FIELD_SETTINGS.items():
        raw = environ.get(env_name)
        if raw is not None and raw.strip():
            values[field_name] = raw.strip()

    try:
        config = SummaryConfig(**values)
    except ValidationError as e:
        raise _configuration_error(e) from e

    logger.debug(
        f"Loaded config: endpoint={config.endpoint_url} key={config.masked_api_key} "
        f"timeout={config.timeout_seconds}s window={config.window_days}d"
    )
    return config
