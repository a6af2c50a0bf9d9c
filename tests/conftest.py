"""Shared test fixtures for apiplay.

Provides reusable fixtures for loading spec fixtures, creating isolated
config environments, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from apiplay.models import ParsedSpec
from apiplay.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _restore_apiplay_logger() -> None:
    """Undo the handler the CLI callback installs on the ``apiplay`` logger.

    Without this, a RichHandler bound to a closed CliRunner stream would
    leak into later tests, and ``propagate = False`` would hide records
    from ``caplog``.
    """
    logger = logging.getLogger("apiplay")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


@pytest.fixture
def wallet_raw() -> dict[str, Any]:
    """Load the raw wallet-stats 3.0 spec dict."""
    with open(FIXTURES_DIR / "wallet_stats.json") as f:
        return json.load(f)


@pytest.fixture
def notes_31_path() -> Path:
    """Path of the YAML OpenAPI 3.1 fixture."""
    return FIXTURES_DIR / "openapi_3.1.yaml"


# ---------------------------------------------------------------------------
# Parsed spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def wallet_spec(wallet_raw: dict[str, Any]) -> ParsedSpec:
    """Parsed wallet-stats spec."""
    from apiplay.parser.extractor import extract_spec

    return extract_spec(wallet_raw)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_DATA_HOME and XDG_CACHE_HOME at tmp_path, clears all
    APIPLAY_* environment variables and changes the working directory to tmp_path so that no
    ``apiplay.json`` from the real working directory is picked up.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    for var in [
        "APIPLAY_CONFIG",
        "APIPLAY_SPEC",
        "APIPLAY_BASE_URL",
        "APIPLAY_TOKEN",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
