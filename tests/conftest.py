# tests/conftest.py
"""
Shared test setup for project.

Every test gets a fresh runtime (log level, color) and a clean
environment for the variables the tool reads, so results do not
depend on the developer's shell.
"""

from collections.abc import Iterator
from pathlib import Path

import pytest
from pytest import Config, Item as PytestItem

import tspico8.runtime as mod_runtime
from tspico8.meta import PROGRAM_ENV
from tests.utils import make_trace, make_workspace

TRACE = make_trace("⚡️")

_ENV_KEYS = ("LOG_LEVEL", "WATCH_INTERVAL")


@pytest.fixture(autouse=True)
def _isolated_runtime(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
        monkeypatch.delenv(f"{PROGRAM_ENV}_{key}", raising=False)
    monkeypatch.delenv(f"{PROGRAM_ENV}_WORKSPACE", raising=False)
    monkeypatch.setitem(mod_runtime.current_runtime, "log_level", "info")
    monkeypatch.setitem(mod_runtime.current_runtime, "use_color", False)
    yield


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A workspace with valid configs and a compiled output file."""
    return make_workspace(tmp_path)


def pytest_collection_modifyitems(
    config: Config,
    items: list[PytestItem],
) -> None:
    """Automatically skip debug tests unless asked for."""
    # detect if the user is filtering for debug tests
    keywords = config.getoption("-k") or ""
    if "debug" in keywords.lower():
        return  # user explicitly requested them, don't skip

    for item in items:
        if "debug" in item.keywords:
            item.add_marker(
                pytest.mark.skip(reason="Skipped debug test (use -k debug to run)")
            )
