"""Pytest configuration and shared fixtures."""

import stat
import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from redistest.adapters.locator import FixedLocator
from redistest.domain.config import FixtureConfig

pytest_plugins = ["pytester"]

FAKE_SERVER = Path(__file__).parent / "fixtures" / "fake_redis_server.py"

# ============================================================================
# Fake server
# ============================================================================
# Most lifecycle tests run against a tiny Python RESP server instead of a
# real redis-server, so they work on machines without Redis installed. It is
# exposed through a wrapper script named like the real executable and found
# via FixedLocator.


@pytest.fixture
def fake_bin_dir(tmp_path: Path) -> Path:
    """Directory containing a `redis-server` that runs the fake server."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    wrapper = bin_dir / "redis-server"
    wrapper.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{FAKE_SERVER}" "$@"\n')
    wrapper.chmod(wrapper.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return bin_dir


@pytest.fixture
def fake_locator(fake_bin_dir: Path) -> FixedLocator:
    """Locator resolving to the fake server."""
    return FixedLocator(fake_bin_dir)


@pytest.fixture
def fast_config() -> FixtureConfig:
    """Config with a small probe budget and short shutdown timeout."""
    return FixtureConfig(
        probe_attempts=500,
        probe_interval=0.01,
        shutdown_timeout=5.0,
    )


# ============================================================================
# Process doubles
# ============================================================================


@pytest.fixture
def mock_process() -> MagicMock:
    """A Popen double that exits cleanly with some captured output."""
    process = MagicMock(spec=subprocess.Popen)
    process.pid = 4242
    process.returncode = 0
    process.communicate.return_value = (b"out", b"err")
    process.poll.return_value = None
    return process
