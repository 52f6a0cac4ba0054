"""
core.stats
Lifetime play statistics, folded from pipeline action logs.

Not part of GameState: the session feeds logs in as a listener, so the
economy never depends on it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class PlayStats:
    sessions_played: int = 0
    session_start: int = 0  # ms, 0 = no open session
    total_play_time: int = 0  # ms
    total_clicks: int = 0
    total_resource_earned: float = 0.0
    total_upgrades_purchased: int = 0
    total_prestiges: int = 0
    fastest_prestige: int = 0  # ms since previous prestige/session start, 0 = none yet
    last_prestige_time: int = 0
    total_achievements: int = 0
    total_daily_rewards: int = 0
    highest_resource_per_second: float = 0.0
    highest_resource_per_click: float = 0.0


def start_session(s: PlayStats, now: int) -> PlayStats:
    return replace(
        s,
        sessions_played=s.sessions_played + 1,
        session_start=int(now),
        last_prestige_time=s.last_prestige_time or int(now),
    )


def end_session(s: PlayStats, now: int) -> PlayStats:
    if not s.session_start:
        return s
    return replace(s, total_play_time=s.total_play_time + max(0, int(now) - s.session_start), session_start=0)


def clicks_per_minute(s: PlayStats, now: int) -> float:
    played = s.total_play_time + (max(0, int(now) - s.session_start) if s.session_start else 0)
    if played <= 0:
        return 0.0
    return s.total_clicks / (played / 60_000.0)


def record_action(s: PlayStats, log: Mapping[str, Any]) -> PlayStats:
    """Fold one pipeline log entry into the statistics."""
    if not log.get("ok"):
        return s
    action = str(log.get("action", ""))
    now = int(log.get("now", 0))
    before = dict(log.get("before") or {})
    after = dict(log.get("after") or {})

    out = replace(s, total_achievements=s.total_achievements + len(log.get("unlocked") or []))

    if action == "click":
        out = replace(out, total_clicks=out.total_clicks + 1)
    elif action == "purchase":
        out = replace(out, total_upgrades_purchased=out.total_upgrades_purchased + 1)
    elif action == "claim_daily":
        out = replace(out, total_daily_rewards=out.total_daily_rewards + 1)
    elif action == "prestige":
        since = now - out.last_prestige_time if out.last_prestige_time else 0
        fastest = out.fastest_prestige
        if since > 0 and (fastest == 0 or since < fastest):
            fastest = since
        out = replace(out, total_prestiges=out.total_prestiges + 1, fastest_prestige=fastest, last_prestige_time=now)

    if action in ("click", "tick", "offline"):
        earned = float(after.get("total_resource_earned", 0.0)) - float(before.get("total_resource_earned", 0.0))
        if earned > 0:
            out = replace(out, total_resource_earned=out.total_resource_earned + earned)

    rps = float(after.get("resource_per_second", 0.0))
    rpc = float(after.get("resource_per_click", 0.0))
    return replace(
        out,
        highest_resource_per_second=max(out.highest_resource_per_second, rps),
        highest_resource_per_click=max(out.highest_resource_per_click, rpc),
    )


def stats_to_dict(s: PlayStats) -> Dict[str, Any]:
    return asdict(s)


def stats_from_mapping(d: Mapping[str, Any]) -> PlayStats:
    known = PlayStats.__dataclass_fields__.keys()
    return PlayStats(**{k: v for k, v in dict(d).items() if k in known})
