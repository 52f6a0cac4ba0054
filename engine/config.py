"""engine.config

Engine configuration passed from UI.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class EngineConfig:
    save_path: str = "tap_tycoon_save.json"
    tick_seconds: float = 1.0
    autosave_seconds: float = 30.0
    event_anchor: Optional[int] = None  # ms; None = anchor events at new-game time

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        e = os.environ if env is None else env
        base = EngineConfig()
        anchor = str(e.get("TAP_TYCOON_EVENT_ANCHOR", "") or "").strip()
        return EngineConfig(
            save_path=str(e.get("TAP_TYCOON_SAVE_PATH", "") or base.save_path),
            tick_seconds=float(e.get("TAP_TYCOON_TICK_SECONDS", "") or base.tick_seconds),
            autosave_seconds=float(e.get("TAP_TYCOON_AUTOSAVE_SECONDS", "") or base.autosave_seconds),
            event_anchor=int(anchor) if anchor else None,
        )
