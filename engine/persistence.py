"""engine.persistence

Persistence gateway interface + two small implementations.

The engine only needs get/set of one serialized blob. A missing or malformed
blob falls back to a new game; a failed save never touches in-memory state.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from core.errors import PersistenceUnavailable
from core.offline import apply_offline_progress
from core.state import GameState, default_start_state, state_from_mapping, state_to_dict

log = logging.getLogger(__name__)

BLOB_KEY = "tapTycoonState"


class PersistenceGateway(Protocol):
    def load(self) -> Optional[str]:
        """Return the stored blob, or None if nothing was saved yet."""
        ...

    def save(self, blob: str) -> None:
        """Store the blob. Raise PersistenceUnavailable on failure."""
        ...


@dataclass
class MemoryGateway:
    """Dict-backed gateway (tests, Streamlit session)."""

    store: Dict[str, str]
    key: str = BLOB_KEY
    fail_saves: bool = False

    def load(self) -> Optional[str]:
        return self.store.get(self.key)

    def save(self, blob: str) -> None:
        if self.fail_saves:
            raise PersistenceUnavailable("memory gateway configured to fail")
        self.store[self.key] = blob


@dataclass
class JsonFileGateway:
    path: Path

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    def load(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceUnavailable(f"read {self.path}: {e}") from e

    def save(self, blob: str) -> None:
        # write-then-rename so a crash never leaves half a file
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=str(self.path.parent))
        except OSError as e:
            raise PersistenceUnavailable(f"write {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(blob)
            os.replace(tmp, self.path)
        except OSError as e:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass
            raise PersistenceUnavailable(f"write {self.path}: {e}") from e


@dataclass(frozen=True)
class LoadResult:
    state: GameState
    restored: bool  # False = new game
    offline_seconds: float = 0.0
    offline_credited: float = 0.0
    error: str = ""


def dumps_state(state: GameState) -> str:
    return json.dumps(state_to_dict(state), ensure_ascii=False, sort_keys=True)


def parse_blob(raw: str, *, now: int) -> GameState:
    """Decode a blob. Raises ValueError (or TypeError/KeyError/OverflowError) when malformed."""
    obj: Any = json.loads(raw)
    if not isinstance(obj, dict):
        raise ValueError("state blob root is not an object")
    return state_from_mapping(obj, now=now)


def load_game(gateway: PersistenceGateway, now: int, anchor: Optional[int] = None) -> LoadResult:
    """Load + offline catch-up, or a fresh game when there is nothing usable."""
    fresh_anchor = int(now if anchor is None else anchor)
    try:
        raw = gateway.load()
    except PersistenceUnavailable as e:
        log.warning("load failed, starting new game: %s", e)
        return LoadResult(state=_new_game(now, fresh_anchor), restored=False, error=str(e))

    if not raw:
        return LoadResult(state=_new_game(now, fresh_anchor), restored=False)

    try:
        loaded = parse_blob(raw, now=now)
    except (ValueError, TypeError, KeyError, OverflowError) as e:
        log.warning("malformed save blob, starting new game: %s: %s", type(e).__name__, e)
        return LoadResult(state=_new_game(now, fresh_anchor), restored=False, error=f"{type(e).__name__}: {e}")

    away = max(0, int(now) - int(loaded.last_save_time)) / 1000.0
    state, credited = apply_offline_progress(loaded, now)
    log.debug("restored save: %.0fs offline, +%.2f", away, credited)
    return LoadResult(state=state, restored=True, offline_seconds=away, offline_credited=credited)


def _new_game(now: int, anchor: int) -> GameState:
    s = default_start_state(anchor)
    return replace(s, last_save_time=int(now))


def save_game(gateway: PersistenceGateway, state: GameState, now: int) -> bool:
    """Stamp last_save_time and store. Returns False (and logs) on failure."""
    blob = dumps_state(replace(state, last_save_time=int(now)))
    try:
        gateway.save(blob)
    except PersistenceUnavailable as e:
        log.warning("save failed, keeping in-memory state: %s", e)
        return False
    return True
