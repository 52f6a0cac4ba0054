"""
core.daily
Daily reward calendar.

The 30-slot table is generated once per new game and survives prestige.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Tuple

from .errors import ClaimNotAvailableError
from .state import DailyRewardSlot, GameState

DAY_MS = 24 * 60 * 60 * 1000
CALENDAR_DAYS = 30


def reward_for(day: int) -> int:
    return int(math.floor(10 * 1.5 ** (int(day) - 1)))


def bonus_for(day: int) -> int:
    # +10% per completed week
    return int(math.floor(reward_for(day) * 0.1 * (int(day) // 7)))


def generate() -> Tuple[DailyRewardSlot, ...]:
    return tuple(
        DailyRewardSlot(day=d, claimed=False, reward=reward_for(d), bonus=bonus_for(d))
        for d in range(1, CALENDAR_DAYS + 1)
    )


def current_claimable_day(last_claim_time: int, now: int) -> int:
    """Day number claimable at `now`; 0 means nothing is claimable yet."""
    if int(last_claim_time) == 0:
        return 1
    days = (int(now) - int(last_claim_time)) // DAY_MS
    if days >= 1:
        return min(CALENDAR_DAYS, int(days) + 1)
    return 0


def can_claim(state: GameState, now: int) -> bool:
    return current_claimable_day(state.last_daily_reward_claim_time, now) > 0


def claim(state: GameState, day: int, now: int) -> GameState:
    """Claim `day`. Raises ClaimNotAvailableError if it is not the claimable day or already claimed."""
    current = current_claimable_day(state.last_daily_reward_claim_time, now)
    if int(day) != current:
        raise ClaimNotAvailableError(day, current, "wrong day")
    slot = next((r for r in state.daily_rewards if r.day == int(day)), None)
    if slot is None:
        raise ClaimNotAvailableError(day, current, "no such day")
    if slot.claimed:
        raise ClaimNotAvailableError(day, current, "already claimed")

    rewards = tuple(replace(r, claimed=True) if r.day == slot.day else r for r in state.daily_rewards)
    return replace(
        state,
        resource=float(state.resource) + slot.reward + slot.bonus,
        daily_rewards=rewards,
        last_daily_reward_claim_time=int(now),
    )


def claimed_days(state: GameState) -> int:
    return sum(1 for r in state.daily_rewards if r.claimed)
