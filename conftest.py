"""
Shared pytest fixtures.
"""

import pytest

from bytlog.sinks import MemorySink


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Every test starts from the default configuration"""
    monkeypatch.delenv('LOG_LEVEL', raising=False)
    monkeypatch.delenv('BYTLOG_DEV', raising=False)
    monkeypatch.delenv('BYTLOG_RELAY_URL', raising=False)


@pytest.fixture
def sink():
    return MemorySink()
