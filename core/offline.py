"""
core.offline
Offline catch-up, applied once per load.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Tuple

from .economy import apply_tick, recompute_derived_rates
from .events import sync_event_flags
from .state import GameState


def offline_seconds(state: GameState, now: int) -> float:
    # A clock that moved backwards credits nothing.
    return max(0, int(now) - int(state.last_save_time)) / 1000.0


def apply_offline_progress(state: GameState, now: int) -> Tuple[GameState, float]:
    """Credit rate-at-save x elapsed time, then recompute rates and stamp last_save_time.

    Uses the serialized resource_per_second (the rate the player actually had
    while away); resource_per_click from the blob is never trusted.
    Returns (new_state, credited).
    """
    before = float(state.resource)
    s = apply_tick(state, offline_seconds(state, now))
    credited = float(s.resource) - before

    s = replace(s, special_events=sync_event_flags(s.special_events, now))
    s = recompute_derived_rates(s, now)
    return replace(s, last_save_time=int(now)), credited
