"""Shared test fixtures and configuration for telejoin tests."""

import importlib
import os
from datetime import datetime, timezone

import pytest

import telejoin.config
from telejoin.presence import InMemoryChannelRegistry


@pytest.fixture(autouse=True)
def isolate_home_directory(tmp_path, monkeypatch):
    """
    Redirect Path.home() and os.path.expanduser() to a temporary directory,
    clear TELEJOIN_* variables, then re-read telejoin.config.

    This keeps a developer's ~/.telejoin/telejoin.env and shell environment
    from leaking into configuration tests.
    """
    fake_home = tmp_path / "home"
    (fake_home / ".telejoin").mkdir(parents=True)

    monkeypatch.setattr("pathlib.Path.home", lambda: fake_home)

    original_expanduser = os.path.expanduser

    def mock_expanduser(path):
        if path.startswith("~"):
            return str(fake_home) + path[1:]
        return original_expanduser(path)

    monkeypatch.setattr("os.path.expanduser", mock_expanduser)

    for key in list(os.environ):
        if key.startswith("TELEJOIN_"):
            monkeypatch.delenv(key)

    # Constants were computed at first import, against the real home and env
    importlib.reload(telejoin.config)

    yield fake_home


@pytest.fixture
def now():
    """A fixed, timezone-aware evaluation instant."""
    return datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def registry():
    return InMemoryChannelRegistry()
