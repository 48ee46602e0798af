"""Shared test fixtures for nwscache.

Provides reusable fixtures for isolating the home directory, building a
cache rooted in a temporary directory, managing output state, and running
CLI commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from pathlib import Path

import pytest

from nwscache.cache import ResponseCache
from nwscache.output import OutputFormat, OutputManager, reset_output, set_output

# A fixed "now" for expiry arithmetic.
NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)


def http_date(value: datetime) -> str:
    """Format *value* the way an ``Expires`` header does."""
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def expires_in(seconds: int, now: datetime = NOW) -> str:
    """``Expires`` header text for *seconds* after *now* (negative for the past)."""
    return http_date(now + timedelta(seconds=seconds))


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
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


# ---------------------------------------------------------------------------
# Time fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def now() -> datetime:
    """The fixed instant tests evaluate expiry against."""
    return NOW


@pytest.fixture
def expiry():
    """Factory: ``expiry(seconds)`` gives an ``Expires`` value relative to ``NOW``."""
    return expires_in


# ---------------------------------------------------------------------------
# Home directory isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``HOME`` at a fresh temporary directory.

    Clears the ``NWSCACHE_*`` environment variables so that tests never
    pick up the real user's settings.

    Returns:
        The temporary home directory.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in ["NWSCACHE_USER_AGENT", "NWSCACHE_TIMEOUT"]:
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """An existing, empty cache root."""
    root = tmp_path / "cache"
    root.mkdir()
    return root


@pytest.fixture
def cache(cache_root: Path) -> ResponseCache:
    """A ResponseCache rooted at ``cache_root``."""
    return ResponseCache(cache_root)


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Set up a quiet output manager for tests that don't care about output.

    Installs a PLAIN-format, quiet OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def verbose_output() -> OutputManager:
    """Plain, colourless output with debug messages enabled."""
    output = OutputManager(format=OutputFormat.PLAIN, verbose=True, no_color=True)
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
