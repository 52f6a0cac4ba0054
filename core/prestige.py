"""
core.prestige
Prestige: trade all progress for a permanent multiplier.
"""

from __future__ import annotations

import math
from dataclasses import replace

from .economy import recompute_derived_rates
from .errors import PrestigeNotEligibleError
from .events import multiplier_for
from .state import GameState, PrestigeData, fresh_upgrades

REQUIREMENT_GROWTH = 10.0


def can_prestige(state: GameState) -> bool:
    return float(state.resource) >= float(state.prestige.resource_required)


def prestige_gain(state: GameState, now: int) -> float:
    """Multiplier increment a reset would grant at `now` (0.0 when ineligible)."""
    if not can_prestige(state):
        return 0.0
    ratio = float(state.resource) / float(state.prestige.resource_required)
    steps = math.floor(math.log10(ratio)) + 1
    return float(steps) * multiplier_for(state.special_events, "prestige", now)


def perform_prestige(state: GameState, now: int) -> GameState:
    """Reset ledger and upgrades, bump prestige. Achievements/daily/events are kept."""
    if not can_prestige(state):
        raise PrestigeNotEligibleError(state.resource, state.prestige.resource_required)

    p = state.prestige
    gain = prestige_gain(state, now)
    new_prestige = PrestigeData(
        level=int(p.level) + 1,
        total_prestige=int(p.total_prestige) + 1,
        multiplier=float(p.multiplier) + gain,
        resource_required=float(p.resource_required) * REQUIREMENT_GROWTH,
    )
    s = replace(
        state,
        resource=0.0,
        resource_per_second=0.0,
        resource_per_click=1.0,
        total_resource_earned=0.0,
        total_clicks=0,
        upgrades=fresh_upgrades(),
        prestige=new_prestige,
    )
    return recompute_derived_rates(s, now)
