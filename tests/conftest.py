"""Shared fixtures for core/engine tests."""
from dataclasses import replace

import pytest

from core.state import UpgradeState, default_start_state

NOW = 1_700_000_000_000
HOUR_MS = 60 * 60 * 1000


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def hour_ms():
    return HOUR_MS


@pytest.fixture
def fresh():
    return default_start_state(NOW)


@pytest.fixture
def with_levels():
    """Return a helper that sets upgrade levels directly (bypassing purchase)."""

    def _set(state, **levels):
        ups = dict(state.upgrades)
        for uid, level in levels.items():
            cur = ups[uid]
            ups[uid] = UpgradeState(level=level, cost=cur.cost, base_effect=cur.base_effect)
        return replace(state, upgrades=ups)

    return _set
