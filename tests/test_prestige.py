"""Tests for prestige resets."""
from dataclasses import replace

import pytest

from core.achievements import unlock_achievement
from core.catalog import CLICK_POWER
from core.daily import claim
from core.errors import PrestigeNotEligibleError
from core.prestige import can_prestige, perform_prestige, prestige_gain


def test_not_eligible_raises_and_changes_nothing(fresh, now):
    state = replace(fresh, resource=999_999.0)
    assert not can_prestige(state)
    assert prestige_gain(state, now) == 0.0
    with pytest.raises(PrestigeNotEligibleError):
        perform_prestige(state, now)
    assert state.resource == 999_999.0
    assert state.prestige.level == 0


def test_prestige_at_threshold(fresh, now, with_levels):
    state = with_levels(replace(fresh, resource=1_000_000.0, total_clicks=500, total_resource_earned=2e6), clickPower=4, goonMine=3)
    after = perform_prestige(state, now)

    assert after.resource == 0.0
    assert after.total_clicks == 0
    assert after.total_resource_earned == 0.0
    assert all(u.level == 0 for u in after.upgrades.values())
    assert after.prestige.level == 1
    assert after.prestige.total_prestige == 1
    assert after.prestige.multiplier == 2.0
    assert after.prestige.resource_required == 10_000_000.0
    assert after.resource_per_click == 2.0
    assert after.resource_per_second == 0.0
    assert after.upgrades[CLICK_POWER].cost == 10


def test_gain_scales_with_overshoot(fresh, now):
    state = replace(fresh, resource=15_000_000.0)
    assert prestige_gain(state, now) == 2.0
    assert perform_prestige(state, now).prestige.multiplier == 3.0


def test_prestige_boost_event_triples_gain(fresh, now, hour_ms):
    state = replace(fresh, resource=1_000_000.0)
    during_boost = now + 150 * hour_ms
    assert prestige_gain(state, during_boost) == 3.0
    assert perform_prestige(state, during_boost).prestige.multiplier == 4.0


def test_requirement_grows_tenfold_per_reset(fresh, now):
    state = fresh
    required = []
    for _ in range(3):
        state = replace(state, resource=state.prestige.resource_required)
        state = perform_prestige(state, now)
        required.append(state.prestige.resource_required)
    assert required == [1e7, 1e8, 1e9]
    assert state.prestige.total_prestige == 3


def test_keeps_achievements_daily_and_events(fresh, now):
    state = claim(fresh, 1, now)
    state = unlock_achievement(state, "first_click")
    state = replace(state, resource=2_000_000.0)
    after = perform_prestige(state, now)
    assert after.achievements == state.achievements
    assert after.daily_rewards == state.daily_rewards
    assert after.special_events == state.special_events
    assert after.last_daily_reward_claim_time == now
