"""Shared test fixtures for chanlog test suite."""

import io
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from chanlog.lib.log_lib import Logger
from chanlog.lib.log_lib import manager as _manager_mod
from chanlog.lib.log_lib.failure import DEBUG_BREAK_ENV
from chanlog.lib.log_lib.launcher import VIEWER_ENV


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
STAMP = "Mon Oct 19 12:00:00 2026"
BANNER = f"File created {STAMP}\r\n".encode("ascii")


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: starts a real interpreter subprocess")


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _isolate(tmp_path, monkeypatch):
    """Run every test in its own directory with no real viewer launches.

    The process-wide Logger writes Log.* into the current directory on
    first use, so each test gets tmp_path as cwd and a fresh singleton.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(DEBUG_BREAK_ENV, raising=False)
    monkeypatch.delenv(VIEWER_ENV, raising=False)
    launched = []
    monkeypatch.setattr(_manager_mod, "start_process", launched.append)
    _manager_mod.reset_log()
    yield launched
    _manager_mod.reset_log()


@pytest.fixture
def default_launches(_isolate):
    """Command lines the default launcher was asked to start."""
    return _isolate


@pytest.fixture
def tmp_config_home(tmp_path):
    """Provide a temporary home directory for ~/.chanlog/config.json."""
    home = tmp_path / "home"
    home.mkdir()
    with patch.dict(os.environ, {"HOME": str(home), "USERPROFILE": str(home)}):
        with patch("pathlib.Path.home", return_value=home):
            yield home


# ---------------------------------------------------------------------------
# Logger fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def out():
    """Buffer standing in for stdout."""
    return io.StringIO()


@pytest.fixture
def err():
    """Buffer standing in for stderr."""
    return io.StringIO()


@pytest.fixture
def launches():
    """Command lines passed to the launcher of loggers from make_log."""
    return []


@pytest.fixture
def make_log(tmp_path, out, err, launches):
    """Factory for Loggers writing under tmp_path with captured streams.

    Every Logger built here is shut down at teardown (viewer disabled).
    """
    created = []

    def _make(base="Log", **kwargs):
        kwargs.setdefault("stdout", out)
        kwargs.setdefault("stderr", err)
        kwargs.setdefault("launcher", launches.append)
        kwargs.setdefault("timestamp", lambda: STAMP)
        kwargs.setdefault("viewer", "view")
        log = Logger(tmp_path / base, **kwargs)
        created.append(log)
        return log

    yield _make

    for log in created:
        log.launch_viewer = False
        log.shutdown()


def records(path):
    """Bytes written to a channel file after its banner."""
    data = Path(path).read_bytes()
    assert data.startswith(BANNER), data[:60]
    return data[len(BANNER):]


@pytest.fixture
def read_records():
    """The records() helper, for tests that read channel files."""
    return records


@pytest.fixture
def banner():
    """Banner line every channel file starts with under make_log."""
    return BANNER
