"""Tests for the daily reward calendar."""
import math
from dataclasses import replace

import pytest

from core.daily import bonus_for, can_claim, claim, claimed_days, current_claimable_day, generate, reward_for
from core.errors import ClaimNotAvailableError


def test_reward_table_values():
    assert reward_for(1) == 10
    assert reward_for(8) == 170
    assert bonus_for(7) == math.floor(reward_for(7) * 0.1 * 1) == 11
    assert [bonus_for(d) for d in range(1, 7)] == [0] * 6
    assert bonus_for(14) == 389


def test_generate():
    table = generate()
    assert [r.day for r in table] == list(range(1, 31))
    assert not any(r.claimed for r in table)
    assert table[7].reward == 170


def test_current_claimable_day(now, hour_ms):
    assert current_claimable_day(0, now) == 1
    assert current_claimable_day(now - 23 * hour_ms, now) == 0
    assert current_claimable_day(now - 25 * hour_ms, now) == 2
    assert current_claimable_day(now - 3 * 24 * hour_ms, now) == 4
    assert current_claimable_day(now - 40 * 24 * hour_ms, now) == 30


def test_first_claim(fresh, now):
    state = claim(fresh, 1, now)
    assert state.resource == 10
    assert state.daily_rewards[0].claimed
    assert state.last_daily_reward_claim_time == now
    assert claimed_days(state) == 1
    assert not can_claim(state, now)


def test_claim_wrong_day(fresh, now):
    with pytest.raises(ClaimNotAvailableError):
        claim(fresh, 2, now)


def test_claim_twice_same_window(fresh, now, hour_ms):
    state = claim(fresh, 1, now)
    with pytest.raises(ClaimNotAvailableError):
        claim(state, 1, now + hour_ms)


def test_claim_next_day(fresh, now, hour_ms):
    state = claim(fresh, 1, now)
    later = now + 25 * hour_ms
    state = claim(state, 2, later)
    assert state.resource == 10 + 15
    assert state.last_daily_reward_claim_time == later


def test_already_claimed_slot(fresh, now, hour_ms):
    # day 2 already taken but the calendar offers it again
    rewards = tuple(replace(r, claimed=r.day == 2) for r in fresh.daily_rewards)
    state = replace(fresh, daily_rewards=rewards, last_daily_reward_claim_time=now - 25 * hour_ms)
    with pytest.raises(ClaimNotAvailableError) as ei:
        claim(state, 2, now)
    assert ei.value.reason == "already claimed"
