"""Pytest configuration for atlassian-cli tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install (`pip install -e .`), and isolates every
test from the developer's real credentials and config file.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path

import pytest

_TEST_START_TIMES: dict[str, float] = {}
_TEST_DURATIONS: list[tuple[str, float]] = []

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from atlassian_cli import logging as cli_logging  # noqa: E402

_ISOLATED_VARS = (
    "ATLASSIAN_URL",
    "ATLASSIAN_USERNAME",
    "ATLASSIAN_API_TOKEN",
    "ATLASSIAN_CLOUD",
    "ATLASSIAN_TIMEOUT",
    "ATLASSIAN_CLI_CONFIG",
    "ATLASSIAN_CLI_LOG_LEVEL",
    "ATLASSIAN_CLI_LOG_JSON",
    "CONFLUENCE_BASE_PATH",
)


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for var in _ISOLATED_VARS:
        monkeypatch.delenv(var, raising=False)
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setattr(cli_logging, "_GLOBAL", None)
    monkeypatch.chdir(tmp_path)
    return config_home


# --- Timing utilities to help identify slow/stalling tests ---


def pytest_runtest_setup(item):  # type: ignore
    _TEST_START_TIMES[item.nodeid] = time.perf_counter()


def pytest_runtest_teardown(item):  # type: ignore
    start = _TEST_START_TIMES.pop(item.nodeid, None)
    if start is not None:
        _TEST_DURATIONS.append((item.nodeid, time.perf_counter() - start))


def pytest_sessionfinish(session, exitstatus):  # type: ignore
    if not _TEST_DURATIONS:
        return
    slow = sorted(_TEST_DURATIONS, key=lambda x: x[1], reverse=True)[:10]
    print("\n=== Slowest Tests (top 10) ===")
    for nodeid, secs in slow:
        print(f"{secs:0.3f}s  {nodeid}")
