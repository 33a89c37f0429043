"""Shared test fixtures for Tiergate-Engine."""

import os

import pytest


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Drop TIERGATE_* env vars and cached settings/tables around each test."""
    for key in list(os.environ):
        if key.startswith("TIERGATE_"):
            monkeypatch.delenv(key)

    from tiergate_engine.common.config import get_settings
    from tiergate_engine.entitlements.plans import get_policy_table

    get_settings.cache_clear()
    get_policy_table.cache_clear()
    yield
    get_settings.cache_clear()
    get_policy_table.cache_clear()


@pytest.fixture
def playlist_limits(monkeypatch):
    """Set TIERGATE_PLAYLIST_LIMITS and rebuild the process-wide table."""

    def _set(value: str):
        monkeypatch.setenv("TIERGATE_PLAYLIST_LIMITS", value)
        from tiergate_engine.common.config import get_settings
        from tiergate_engine.entitlements.plans import get_policy_table

        get_settings.cache_clear()
        get_policy_table.cache_clear()
        return get_policy_table()

    return _set
