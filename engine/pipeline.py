"""engine.pipeline

Core action flow (headless).

Responsibilities:
- Dispatch one player/timer intent (click, tick, purchase, claim, prestige)
- Run the follow-up step: event flags, derived rates, achievements
- Produce a JSON-friendly log entry per action

Engine errors never escape apply_action(): the state is returned unchanged
and the log carries ok=False + the error text.

This layer is UI-agnostic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Tuple

from core.achievements import evaluate_achievements
from core.daily import claim
from core.economy import apply_click, apply_tick, cost_of, purchase, recompute_derived_rates
from core.errors import EngineError
from core.events import sync_event_flags
from core.prestige import perform_prestige, prestige_gain
from core.state import GameState

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Action:
    kind: str
    upgrade_id: str = ""
    day: int = 0
    elapsed_seconds: float = 1.0

    @staticmethod
    def click() -> "Action":
        return Action("click")

    @staticmethod
    def tick(elapsed_seconds: float = 1.0) -> "Action":
        return Action("tick", elapsed_seconds=float(elapsed_seconds))

    @staticmethod
    def buy(upgrade_id: str) -> "Action":
        return Action("purchase", upgrade_id=str(upgrade_id))

    @staticmethod
    def claim_daily(day: int) -> "Action":
        return Action("claim_daily", day=int(day))

    @staticmethod
    def prestige() -> "Action":
        return Action("prestige")


def ledger_summary(s: GameState) -> Dict[str, Any]:
    return {
        "resource": float(s.resource),
        "resource_per_second": float(s.resource_per_second),
        "resource_per_click": float(s.resource_per_click),
        "total_resource_earned": float(s.total_resource_earned),
        "total_clicks": int(s.total_clicks),
        "prestige_level": int(s.prestige.level),
        "prestige_multiplier": float(s.prestige.multiplier),
    }


def settle(state: GameState, now: int) -> Tuple[GameState, List[str]]:
    """Follow-up step after every mutation. Returns (state, newly_unlocked_ids)."""
    s = replace(state, special_events=sync_event_flags(state.special_events, now))
    s = recompute_derived_rates(s, now)
    s, fired = evaluate_achievements(s, now)
    return s, [a.id for a in fired]


def _run(state: GameState, action: Action, now: int) -> Tuple[GameState, Dict[str, Any]]:
    extra: Dict[str, Any] = {}
    if action.kind == "click":
        return apply_click(state), extra
    if action.kind == "tick":
        extra["elapsed_seconds"] = float(action.elapsed_seconds)
        return apply_tick(state, action.elapsed_seconds), extra
    if action.kind == "purchase":
        extra["upgrade_id"] = action.upgrade_id
        extra["cost"] = cost_of(state, action.upgrade_id, now)
        s = purchase(state, action.upgrade_id, now)
        extra["level"] = s.upgrades[action.upgrade_id].level
        return s, extra
    if action.kind == "claim_daily":
        extra["day"] = int(action.day)
        return claim(state, action.day, now), extra
    if action.kind == "prestige":
        extra["gain"] = prestige_gain(state, now)
        return perform_prestige(state, now), extra
    raise ValueError(f"Unknown action kind: {action.kind}")


def apply_action(state: GameState, action: Action, now: int) -> Tuple[GameState, Dict[str, Any]]:
    """Apply one action atomically. Returns (new_state, action_log)."""
    before = ledger_summary(state)
    entry: Dict[str, Any] = {"action": action.kind, "now": int(now), "before": before}
    try:
        s, extra = _run(state, action, now)
    except EngineError as e:
        log.info("action %s rejected: %s", action.kind, e)
        entry.update({"ok": False, "error": f"{type(e).__name__}: {e}", "after": dict(before), "unlocked": []})
        return state, entry

    s, unlocked = settle(s, now)
    entry.update(extra)
    entry.update({"ok": True, "after": ledger_summary(s), "unlocked": unlocked})
    return s, entry
