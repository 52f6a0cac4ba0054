"""
core.selfcheck
Minimal "it runs" proof for the economy core.

Run:
  python -m core.selfcheck
"""

from __future__ import annotations

from dataclasses import replace

from .achievements import evaluate_achievements
from .catalog import CLICK_POWER, UPGRADE_CATALOG
from .daily import claim, current_claimable_day
from .economy import apply_click, apply_tick, click_rate, cost_of, purchase
from .errors import EngineError
from .offline import apply_offline_progress
from .prestige import can_prestige, perform_prestige
from .state import default_start_state

HOUR_MS = 60 * 60 * 1000


def run_one_hour_smoke() -> None:
    now = 1_700_000_000_000
    state = default_start_state(now)

    for _ in range(3600):
        for _ in range(8):
            state = apply_click(state)
        state, _ = evaluate_achievements(state, now)

        day = current_claimable_day(state.last_daily_reward_claim_time, now)
        if day:
            state = claim(state, day, now)

        for d in UPGRADE_CATALOG:
            try:
                state = purchase(state, d.id, now)
            except EngineError:
                continue

        state = apply_tick(state, 1.0)
        now += 1000

        # invariants
        assert state.resource >= 0.0
        assert all(u.level >= 0 for u in state.upgrades.values())
        assert state.resource_per_click == click_rate(state.upgrades[CLICK_POWER].level, state.prestige.multiplier)

    # offline: one hour away at the current rate
    away = replace(state, last_save_time=now)
    restored, credited = apply_offline_progress(away, now + HOUR_MS)
    assert abs(credited - state.resource_per_second * 3600) < 1e-6

    if can_prestige(restored):
        restored = perform_prestige(restored, now + HOUR_MS)

    print("OK: 1-hour core smoke test passed.")
    print("Resource:", round(restored.resource, 2), "per second:", restored.resource_per_second)
    print("Click power cost:", cost_of(restored, CLICK_POWER, now + HOUR_MS))
    print("Achievements:", sorted(restored.achievements))


if __name__ == "__main__":
    run_one_hour_smoke()
