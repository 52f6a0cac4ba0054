"""engine.logging

Small helpers for storing session logs.

A session export is JSON-serializable so it can be downloaded/imported later.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Optional

from core.state import GameState, state_to_dict
from core.stats import PlayStats, stats_to_dict

EXPORT_VERSION = 1


def make_session_export(
    *,
    config: Dict[str, Any],
    state: GameState,
    action_logs: List[Dict[str, Any]],
    stats: Optional[PlayStats] = None,
) -> Dict[str, Any]:
    return {
        "version": EXPORT_VERSION,
        "config": dict(config),
        "state": state_to_dict(state),
        "action_logs": list(action_logs),
        "stats": stats_to_dict(stats) if stats is not None else None,
    }


def dumps_session_export(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, sort_keys=True)


def export_session(session: Any) -> Dict[str, Any]:
    """Build an export from an engine.session.GameSession."""
    from .session import StatsRecorder

    stats = next((fn.stats for fn in session.listeners if isinstance(fn, StatsRecorder)), None)
    return make_session_export(
        config=asdict(session.config),
        state=session.snapshot(),
        action_logs=list(session.logs),
        stats=stats,
    )


def summarize_logs(action_logs: List[Mapping[str, Any]]) -> Dict[str, int]:
    """Count of accepted/rejected entries per action kind."""
    out: Dict[str, int] = {}
    for e in action_logs:
        key = f"{e.get('action', '?')}:{'ok' if e.get('ok') else 'rejected'}"
        out[key] = out.get(key, 0) + 1
    return out
