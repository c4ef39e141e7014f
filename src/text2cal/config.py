"""Configuration loading for text2cal.

Reads settings from environment variables (with .env support via python-dotenv)
and validates the optional overrides.  The API key is deliberately not
required here: a missing key is reported by the pipeline as an
``unauthenticated`` failure at submission time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx
from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_MODEL = "deepseek-chat"


class ConfigError(Exception):
    """Raised when configuration values are invalid."""


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        api_key: Bearer credential for the chat-completion endpoint.
        base_url: Endpoint base URL; ``/chat/completions`` is appended.
        model: Model identifier sent with each request.
        timezone: IANA timezone used for the calendar file.
        log_level: Logging level (default ``"INFO"``).
        max_input_chars: Longest input text accepted for extraction.
        deadline_seconds: Overall deadline for one extraction attempt, in seconds.
    """

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timezone: str = "Asia/Shanghai"
    log_level: str = "INFO"
    max_input_chars: int = 4000
    deadline_seconds: float = 180.0

    def __repr__(self) -> str:
        return (
            f"Settings(api_key='***', "
            f"base_url={self.base_url!r}, "
            f"model={self.model!r}, "
            f"timezone={self.timezone!r}, "
            f"log_level={self.log_level!r}, "
            f"max_input_chars={self.max_input_chars!r}, "
            f"deadline_seconds={self.deadline_seconds!r})"
        )


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Calls :func:`dotenv.load_dotenv` so a ``.env`` file in the project root
    is picked up automatically.

    Returns:
        A validated :class:`Settings` instance.

    Raises:
        ConfigError: If any variable holds an invalid value.  The error
            message names **all** offending variables.
    """
    load_dotenv()

    values: dict[str, object] = {}
    invalid: list[str] = []

    string_vars = {
        "TEXT2CAL_API_KEY": "api_key",
        "TEXT2CAL_MODEL": "model",
        "LOG_LEVEL": "log_level",
    }
    for env_var, field_name in string_vars.items():
        raw = os.environ.get(env_var, "").strip()
        if raw:
            values[field_name] = raw

    base_url = os.environ.get("TEXT2CAL_BASE_URL", "").strip()
    if base_url:
        if _is_http_url(base_url):
            values["base_url"] = base_url
        else:
            invalid.append("TEXT2CAL_BASE_URL")

    timezone =os.environ.get("TIMEZONE", "").strip()
    if timezone:
        try:
            ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError):
            invalid.append("TIMEZONE")
        else:
            values["timezone"] = timezone

    max_chars = os.environ.get("TEXT2CAL_MAX_INPUT_CHARS", "").strip()
    if max_chars:
        try:
            parsed_chars = int(max_chars)
        except ValueError:
            parsed_chars = 0
        if parsed_chars > 0:
            values["max_input_chars"] = parsed_chars
        else:
            invalid.append("TEXT2CAL_MAX_INPUT_CHARS")

    deadline = os.environ.get("TEXT2CAL_DEADLINE_SECONDS", "").strip()
    if deadline:
        try:
            parsed_deadline = float(deadline)
        except ValueError:
            parsed_deadline = 0.0
        if parsed_deadline > 0:
            values["deadline_seconds"] = parsed_deadline
        else:
            invalid.append("TEXT2CAL_DEADLINE_SECONDS")

    if invalid:
        names = ", ".join(invalid)
        raise ConfigError(f"Invalid values for environment variables: {names}")

    return Settings(**values)


def _is_http_url(value: str) -> bool:
    """Return True if *value* parses as an absolute http(s) URL with a host."""
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL:
        return False
    return url.scheme in ("http", "https") and bool(url.host)
