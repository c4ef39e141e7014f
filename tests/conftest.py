"""Shared fixtures for text2cal tests."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest

_ENV_VARS = (
    "TEXT2CAL_API_KEY",
    "TEXT2CAL_BASE_URL",
    "TEXT2CAL_MODEL",
    "TEXT2CAL_MAX_INPUT_CHARS",
    "TEXT2CAL_DEADLINE_SECONDS",
    "LOG_LEVEL",
    "TIMEZONE",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all text2cal-related environment variables.

    Patches ``load_dotenv`` so a real ``.env`` file cannot re-inject values
    that the test explicitly removed.
    """
    monkeypatch.setattr("text2cal.config.load_dotenv", lambda *_a, **_kw: None)
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def monkeypatch_env(clean_env: None, monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set the API key and a fixed timezone.

    Returns the dict of variables so tests can inspect or override values.
    """
    env_vars = {
        "TEXT2CAL_API_KEY": "test-api-key-12345",
        "TIMEZONE": "Asia/Shanghai",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture(autouse=True)
def _reset_root_logger() -> Generator[None, None, None]:
    """Reset the root and HTTP library loggers after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    library_levels = {
        name: logging.getLogger(name).level for name in ("httpx", "httpcore")
    }
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    for name, level in library_levels.items():
        logging.getLogger(name).setLevel(level)
