"""
core.economy
Resource ledger + upgrade economy (pure functions).

- click / tick accrual
- derived rate recompute (single source of truth for both rates)
- upgrade pricing with discount events
- purchases
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Dict

from .catalog import CLICK_POWER, CLICK_POWER_UNIT_EFFECT, COST_GROWTH, UPGRADE_CATALOG, get_upgrade_def
from .errors import InsufficientResourceError
from .events import multiplier_for
from .state import GameState, UpgradeState


def click_rate(click_level: int, prestige_multiplier: float, click_event_multiplier: float = 1.0) -> float:
    return float(
        math.floor((1 + int(click_level) * CLICK_POWER_UNIT_EFFECT) * float(prestige_multiplier) * float(click_event_multiplier))
    )


def second_rate(upgrades: Dict[str, UpgradeState], prestige_multiplier: float, production_event_multiplier: float = 1.0) -> float:
    base = 0.0
    for d in UPGRADE_CATALOG:
        if d.id == CLICK_POWER:
            continue
        u = upgrades.get(d.id)
        if u is None:
            continue
        base += int(u.level) * float(d.base_effect)
    return base * float(prestige_multiplier) * float(production_event_multiplier)


def recompute_derived_rates(state: GameState, now: int) -> GameState:
    """Recompute resource_per_click / resource_per_second (idempotent)."""
    mult = float(state.prestige.multiplier)
    click_level = state.upgrades[CLICK_POWER].level if CLICK_POWER in state.upgrades else 0
    per_click = click_rate(click_level, mult, multiplier_for(state.special_events, "clicking", now))
    per_second = second_rate(state.upgrades, mult, multiplier_for(state.special_events, "production", now))
    if per_click == state.resource_per_click and per_second == state.resource_per_second:
        return state
    return replace(state, resource_per_click=per_click, resource_per_second=per_second)


def apply_click(state: GameState) -> GameState:
    gain = float(state.resource_per_click)
    return replace(
        state,
        resource=float(state.resource) + gain,
        total_resource_earned=float(state.total_resource_earned) + gain,
        total_clicks=int(state.total_clicks) + 1,
    )


def apply_tick(state: GameState, elapsed_seconds: float) -> GameState:
    gain = float(state.resource_per_second) * max(0.0, float(elapsed_seconds))
    if gain <= 0.0:
        return state
    return replace(
        state,
        resource=float(state.resource) + gain,
        total_resource_earned=float(state.total_resource_earned) + gain,
    )


# -------------------------
# Upgrades
# -------------------------


def base_cost_at(base_cost: float, level: int) -> int:
    return int(math.floor(float(base_cost) * COST_GROWTH ** int(level)))


def cost_of(state: GameState, upgrade_id: str, now: int) -> int:
    """Current price; an active discount event divides it."""
    d = get_upgrade_def(upgrade_id)
    level = state.upgrades[d.id].level if d.id in state.upgrades else 0
    cost = base_cost_at(d.base_cost, level)
    divisor = multiplier_for(state.special_events, "upgrades", now)
    if divisor == 1.0:
        return cost
    return int(math.floor(cost / divisor))


def can_afford(state: GameState, upgrade_id: str, now: int) -> bool:
    return float(state.resource) >= cost_of(state, upgrade_id, now)


def purchase(state: GameState, upgrade_id: str, now: int) -> GameState:
    """Buy one level. Raises InsufficientResourceError (state unchanged)."""
    d = get_upgrade_def(upgrade_id)
    cost = cost_of(state, d.id, now)
    if float(state.resource) < cost:
        raise InsufficientResourceError(d.id, cost, state.resource)

    cur = state.upgrades[d.id]
    new_level = int(cur.level) + 1
    upgrades = dict(state.upgrades)
    upgrades[d.id] = UpgradeState(level=new_level, cost=base_cost_at(d.base_cost, new_level), base_effect=cur.base_effect)

    s = replace(state, resource=float(state.resource) - cost, upgrades=upgrades)
    return recompute_derived_rates(s, now)
