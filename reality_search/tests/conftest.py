"""
Shared pytest fixtures for reality-search tests.

Upstream keys are cleared so nothing in the suite can reach a real provider.
"""
from __future__ import annotations

import os

import pytest

# Set test environment before importing application modules
os.environ["APP_ENV"] = "test"
for _name in ("SERPAPI_API_KEY", "SEARCHAPI_API_KEY", "BRAVE_API_KEY", "BUILD_SHA", "GITHUB_SHA"):
    os.environ.pop(_name, None)

from reality_search.config import get_settings  # noqa: E402
from reality_search.services.cost_control import reset_cost_control  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_process_state():
    """Every test starts with fresh settings and empty cost-control counters."""
    get_settings.cache_clear()
    reset_cost_control()
    yield
    get_settings.cache_clear()
    reset_cost_control()


@pytest.fixture
def server_keys(monkeypatch):
    """Configure server keys for all three providers."""
    monkeypatch.setenv("SERPAPI_API_KEY", "server-serpapi-key")
    monkeypatch.setenv("SEARCHAPI_API_KEY", "server-searchapi-key")
    monkeypatch.setenv("BRAVE_API_KEY", "server-brave-key")
    get_settings.cache_clear()
    yield get_settings()
