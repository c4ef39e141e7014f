"""Tests for text2cal package structure and imports."""

from __future__ import annotations

import re
import subprocess
import sys


def test_package_is_importable() -> None:
    """``import text2cal`` must succeed without errors."""
    import text2cal  # noqa: F401


def test_package_has_version() -> None:
    """``text2cal.__version__`` must be defined."""
    import text2cal

    assert text2cal.__version__ == "0.1.0"


def test_package_version_is_semver() -> None:
    """Version string must match semantic versioning format."""
    import text2cal

    assert re.match(r"^\d+\.\d+\.\d+$", text2cal.__version__)


def test_main_module_help() -> None:
    """``python -m text2cal --help`` must run and exit cleanly."""
    result = subprocess.run(
        [sys.executable, "-m", "text2cal", "--help"],
        capture_output=True,
        text=True,
        timeout=10,
    )
    assert result.returncode == 0
    assert "usage: text2cal" in result.stdout
    assert "Traceback" not in result.stderr


def test_public_api_exports() -> None:
    """Names listed in ``__all__`` must resolve."""
    import text2cal

    for name in text2cal.__all__:
        assert hasattr(text2cal, name), name


def test_config_module_importable() -> None:
    """Core config exports must be importable."""
    from text2cal.config import ConfigError, load_settings  # noqa: F401


def test_logging_module_importable() -> None:
    """Core logging exports must be importable."""
    from text2cal.log import get_logger, setup_logging  # noqa: F401
