"""engine.session

Single-writer game session.

Every mutation (UI intent, tick timer, load) is a read-modify-write against
the latest snapshot under one lock, so deltas are never applied to a stale
copy. Autosave serializes under the lock and does the I/O outside it.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.achievements import AchievementDef, unlocked_achievements
from core.daily import current_claimable_day
from core.economy import cost_of
from core.events import active_events
from core.prestige import can_prestige, prestige_gain
from core.state import GameState, SpecialEvent
from core.stats import PlayStats, end_session, record_action, start_session

from .config import EngineConfig
from .notices import Notice, notices_between, push
from .persistence import LoadResult, PersistenceGateway, load_game, save_game
from .pipeline import Action, apply_action, ledger_summary

log = logging.getLogger(__name__)

Listener = Callable[[GameState, GameState, Dict[str, Any]], None]


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class StatsRecorder:
    """Listener that folds action logs into PlayStats."""

    stats: PlayStats = field(default_factory=PlayStats)

    def __call__(self, before: GameState, after: GameState, entry: Dict[str, Any]) -> None:
        self.stats = record_action(self.stats, entry)


@dataclass
class NoticeFeed:
    """Listener that keeps the capped notice feed."""

    notices: Tuple[Notice, ...] = ()

    def __call__(self, before: GameState, after: GameState, entry: Dict[str, Any]) -> None:
        now = int(entry.get("now", 0))
        since = int(entry.get("since", now))
        new = notices_between(before, after, now, since)
        if new:
            self.notices = push(self.notices, new)


class _Repeater:
    """Re-arming daemon timer."""

    def __init__(self, interval: float, fn: Callable[[], None], name: str) -> None:
        self.interval = float(interval)
        self.fn = fn
        self.name = name
        self._timer: Optional[threading.Timer] = None
        self._stopped = True

    def start(self) -> None:
        self._stopped = False
        self._arm()

    def _arm(self) -> None:
        if self._stopped:
            return
        self._timer = threading.Timer(self.interval, self._fire)
        self._timer.daemon = True
        self._timer.name = self.name
        self._timer.start()

    def _fire(self) -> None:
        try:
            self.fn()
        except Exception:
            log.exception("%s timer callback failed", self.name)
        self._arm()

    def stop(self) -> None:
        self._stopped = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class GameSession:
    def __init__(
        self,
        gateway: PersistenceGateway,
        config: Optional[EngineConfig] = None,
        *,
        clock: Callable[[], int] = wall_clock_ms,
        listeners: Optional[List[Listener]] = None,
    ) -> None:
        self.gateway = gateway
        self.config = config or EngineConfig()
        self.clock = clock
        self.listeners: List[Listener] = list(listeners or [])
        self.logs: List[Dict[str, Any]] = []
        self.load_result: Optional[LoadResult] = None

        self._lock = threading.RLock()
        self._save_lock = threading.Lock()
        self._state: Optional[GameState] = None
        self._last_seen = 0
        self._ticker: Optional[_Repeater] = None
        self._saver: Optional[_Repeater] = None

    # -------------------------
    # Lifecycle
    # -------------------------

    def open(self) -> LoadResult:
        """Load (or start) the game. Offline progress is applied here, once."""
        with self._lock:
            now = int(self.clock())
            res = load_game(self.gateway, now, anchor=self.config.event_anchor)
            self._state = res.state
            self._last_seen = now
            self.load_result = res
            for fn in self.listeners:
                if isinstance(fn, StatsRecorder):
                    fn.stats = start_session(fn.stats, now)
            if res.restored:
                entry = {
                    "action": "offline",
                    "ok": True,
                    "now": now,
                    "since": now,
                    "offline_seconds": res.offline_seconds,
                    "credited": res.offline_credited,
                    "before": ledger_summary(res.state),
                    "after": ledger_summary(res.state),
                    "unlocked": [],
                }
                self.logs.append(entry)
            return res

    def close(self) -> bool:
        self.stop_timers()
        with self._lock:
            now = int(self.clock())
            for fn in self.listeners:
                if isinstance(fn, StatsRecorder):
                    fn.stats = end_session(fn.stats, now)
        return self.save()

    def start_timers(self) -> None:
        self.stop_timers()
        self._ticker = _Repeater(self.config.tick_seconds, self.tick, "tick")
        self._saver = _Repeater(self.config.autosave_seconds, self.save, "autosave")
        self._ticker.start()
        self._saver.start()
        log.debug("timers started (tick=%ss, autosave=%ss)", self.config.tick_seconds, self.config.autosave_seconds)

    def stop_timers(self) -> None:
        for t in (self._ticker, self._saver):
            if t is not None:
                t.stop()
        if self._ticker or self._saver:
            log.debug("timers stopped")
        self._ticker = self._saver = None

    # -------------------------
    # Mutations
    # -------------------------

    def dispatch(self, action: Action) -> Dict[str, Any]:
        with self._lock:
            before = self._require_state()
            now = int(self.clock())
            after, entry = apply_action(before, action, now)
            entry["since"] = self._last_seen
            self._state = after
            self._last_seen = now
            self.logs.append(entry)
            for fn in self.listeners:
                fn(before, after, entry)
            return entry

    def click(self) -> Dict[str, Any]:
        return self.dispatch(Action.click())

    def tick(self) -> Dict[str, Any]:
        return self.dispatch(Action.tick(self.config.tick_seconds))

    def buy(self, upgrade_id: str) -> Dict[str, Any]:
        return self.dispatch(Action.buy(upgrade_id))

    def claim_daily(self, day: int) -> Dict[str, Any]:
        return self.dispatch(Action.claim_daily(day))

    def prestige(self) -> Dict[str, Any]:
        return self.dispatch(Action.prestige())

    def save(self) -> bool:
        # Saves are serialized: each one snapshots after the previous write.
        with self._save_lock:
            with self._lock:
                state = self._require_state()
                now = int(self.clock())
            ok = save_game(self.gateway, state, now)
            if ok:
                with self._lock:
                    cur = self._require_state()
                    if now > cur.last_save_time:
                        self._state = replace(cur, last_save_time=now)
            return ok

    # -------------------------
    # Queries
    # -------------------------

    def snapshot(self) -> GameState:
        with self._lock:
            return self._require_state()

    def unlocked_achievements(self) -> List[AchievementDef]:
        return unlocked_achievements(self.snapshot())

    def active_events(self) -> List[SpecialEvent]:
        return active_events(self.snapshot().special_events, int(self.clock()))

    def claimable_day(self) -> int:
        return current_claimable_day(self.snapshot().last_daily_reward_claim_time, int(self.clock()))

    def cost_of(self, upgrade_id: str) -> int:
        return cost_of(self.snapshot(), upgrade_id, int(self.clock()))

    def can_prestige(self) -> bool:
        return can_prestige(self.snapshot())

    def prestige_gain(self) -> float:
        return prestige_gain(self.snapshot(), int(self.clock()))

    def _require_state(self) -> GameState:
        if self._state is None:
            raise RuntimeError("session not opened; call open() first")
        return self._state
