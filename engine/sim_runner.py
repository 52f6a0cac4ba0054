"""engine.sim_runner

Headless runner for quick sanity checks.

This keeps tests deterministic and CI-friendly: no wall clock, no files.
It uses a tiny manual clock and a greedy scripted player.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from core.catalog import UPGRADE_CATALOG
from core.daily import current_claimable_day
from core.economy import cost_of
from core.prestige import can_prestige

from .config import EngineConfig
from .persistence import MemoryGateway
from .session import GameSession, NoticeFeed, StatsRecorder


@dataclass
class ManualClock:
    """Deterministic clock for tests (ms)."""

    now: int = 1_700_000_000_000

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


def greedy_step(session: GameSession, clicks_per_second: int = 5) -> None:
    """One simulated second: clicks, claim, buy cheapest, maybe prestige, tick."""
    for _ in range(clicks_per_second):
        session.click()

    now = session.clock()
    day = current_claimable_day(session.snapshot().last_daily_reward_claim_time, now)
    if day > 0:
        session.claim_daily(day)

    state = session.snapshot()
    costs = sorted((cost_of(state, d.id, now), d.id) for d in UPGRADE_CATALOG)
    cheapest_cost, cheapest_id = costs[0]
    if state.resource >= cheapest_cost:
        session.buy(cheapest_id)

    if can_prestige(session.snapshot()):
        session.prestige()

    session.tick()


def run_headless_sim(seconds: int = 600, clicks_per_second: int = 5) -> Dict[str, Any]:
    """Run a deterministic session and return summary."""
    clock = ManualClock()
    recorder = StatsRecorder()
    feed = NoticeFeed()
    session = GameSession(
        MemoryGateway({}),
        EngineConfig(tick_seconds=1.0, autosave_seconds=30.0),
        clock=clock,
        listeners=[recorder, feed],
    )
    session.open()

    saves: List[bool] = []
    for i in range(int(seconds)):
        greedy_step(session, clicks_per_second=clicks_per_second)
        clock.advance(1.0)
        if (i + 1) % int(session.config.autosave_seconds) == 0:
            saves.append(session.save())

    return {
        "seconds": int(seconds),
        "final": session.snapshot(),
        "logs": session.logs,
        "stats": recorder.stats,
        "notices": feed.notices,
        "saves": saves,
    }
