"""
core.state
Core domain data models (UI/storage independent).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Tuple


@dataclass(frozen=True)
class UpgradeState:
    """Per-upgrade progress.

    `cost` is cached for display only; core.economy.cost_of() is authoritative.
    """

    level: int
    cost: int
    base_effect: float


@dataclass(frozen=True)
class DailyRewardSlot:
    day: int  # 1..30
    claimed: bool
    reward: int
    bonus: int


@dataclass(frozen=True)
class SpecialEvent:
    """A scheduled, time-windowed multiplier.

    `active` is derived from the window and refreshed by core.events.sync_event_flags().
    """

    id: str
    name: str
    description: str
    start_time: int  # ms
    end_time: int  # ms
    multiplier: float
    active: bool = False


@dataclass(frozen=True)
class PrestigeData:
    level: int = 0
    total_prestige: int = 0
    multiplier: float = 1.0
    resource_required: float = 1_000_000.0


@dataclass(frozen=True)
class GameState:
    """Root aggregate.

    Owned by the engine; every operation returns a new snapshot.
    """

    resource: float
    resource_per_second: float
    resource_per_click: float
    total_resource_earned: float
    total_clicks: int
    upgrades: Dict[str, UpgradeState]
    achievements: FrozenSet[str] = frozenset()
    daily_rewards: Tuple[DailyRewardSlot, ...] = ()
    special_events: Tuple[SpecialEvent, ...] = ()
    prestige: PrestigeData = field(default_factory=PrestigeData)
    last_save_time: int = 0  # ms
    last_daily_reward_claim_time: int = 0  # ms, 0 = never


def fresh_upgrades() -> Dict[str, UpgradeState]:
    """Level-0 upgrade table straight from the catalog."""
    from .catalog import UPGRADE_CATALOG

    return {
        d.id: UpgradeState(level=0, cost=int(d.base_cost), base_effect=float(d.base_effect))
        for d in UPGRADE_CATALOG
    }


def default_start_state(now: int) -> GameState:
    """Baseline new-game state.

    Keep it in core so headless tests and UI share the same baseline.
    Events are scheduled relative to `now`.
    """
    from .daily import generate
    from .events import schedule_events

    return GameState(
        resource=0.0,
        resource_per_second=0.0,
        resource_per_click=1.0,
        total_resource_earned=0.0,
        total_clicks=0,
        upgrades=fresh_upgrades(),
        achievements=frozenset(),
        daily_rewards=generate(),
        special_events=schedule_events(int(now)),
        prestige=PrestigeData(),
        last_save_time=int(now),
        last_daily_reward_claim_time=0,
    )


# -------------------------
# Serialization
# -------------------------


def state_to_dict(s: GameState) -> Dict[str, Any]:
    """Flat JSON-friendly record; field names follow the dataclasses."""
    return {
        "resource": float(s.resource),
        "resource_per_second": float(s.resource_per_second),
        "resource_per_click": float(s.resource_per_click),
        "total_resource_earned": float(s.total_resource_earned),
        "total_clicks": int(s.total_clicks),
        "upgrades": {
            k: {"level": int(u.level), "cost": int(u.cost), "base_effect": float(u.base_effect)}
            for k, u in s.upgrades.items()
        },
        "achievements": sorted(s.achievements),
        "daily_rewards": [
            {"day": int(r.day), "claimed": bool(r.claimed), "reward": int(r.reward), "bonus": int(r.bonus)}
            for r in s.daily_rewards
        ],
        "special_events": [
            {
                "id": e.id,
                "name": e.name,
                "description": e.description,
                "start_time": int(e.start_time),
                "end_time": int(e.end_time),
                "multiplier": float(e.multiplier),
                "active": bool(e.active),
            }
            for e in s.special_events
        ],
        "prestige": {
            "level": int(s.prestige.level),
            "total_prestige": int(s.prestige.total_prestige),
            "multiplier": float(s.prestige.multiplier),
            "resource_required": float(s.prestige.resource_required),
        },
        "last_save_time": int(s.last_save_time),
        "last_daily_reward_claim_time": int(s.last_daily_reward_claim_time),
    }


# Above this the 1.15^L cost curve leaves float range.
MAX_UPGRADE_LEVEL = 1000


def _finite(v: Any, name: str) -> float:
    """float(v), or ValueError if it is not a finite number."""
    if isinstance(v, bool):
        raise TypeError(f"{name} must be a number, got bool")
    try:
        x = float(v)
    except OverflowError as e:
        raise ValueError(f"{name} out of range") from e
    if not math.isfinite(x):
        raise ValueError(f"{name} is not finite: {v!r}")
    return x


def _whole(v: Any, name: str) -> int:
    return int(_finite(v, name))


def _upgrades_from_mapping(raw: Any) -> Dict[str, UpgradeState]:
    # Catalog drives the key set: unknown ids are dropped, missing ids start at 0.
    out = fresh_upgrades()
    if not isinstance(raw, Mapping):
        return out
    for k, base in out.items():
        u = raw.get(k)
        if not isinstance(u, Mapping):
            continue
        level = max(0, _whole(u.get("level", 0), f"upgrades.{k}.level"))
        if level > MAX_UPGRADE_LEVEL:
            raise ValueError(f"upgrades.{k}.level {level} exceeds {MAX_UPGRADE_LEVEL}")
        out[k] = UpgradeState(
            level=level,
            cost=_whole(u.get("cost", base.cost), f"upgrades.{k}.cost"),
            base_effect=base.base_effect,
        )
    return out


def _daily_from_list(raw: Any) -> Tuple[DailyRewardSlot, ...]:
    from .daily import generate

    table = list(generate())
    if not isinstance(raw, list):
        return tuple(table)
    claimed = {_whole(r.get("day", 0), "daily_rewards.day") for r in raw if isinstance(r, Mapping) and r.get("claimed")}
    return tuple(
        DailyRewardSlot(day=r.day, claimed=r.day in claimed, reward=r.reward, bonus=r.bonus) for r in table
    )


def _events_from_list(raw: Any, anchor: int) -> Tuple[SpecialEvent, ...]:
    from .events import schedule_events

    if not isinstance(raw, list) or not raw:
        return schedule_events(int(anchor))
    out = []
    for e in raw:
        if not isinstance(e, Mapping):
            raise ValueError("special_events entries must be objects")
        multiplier = _finite(e.get("multiplier", 1.0), "special_events.multiplier")
        if multiplier <= 0:
            raise ValueError(f"special_events.multiplier must be > 0, got {multiplier}")
        out.append(
            SpecialEvent(
                id=str(e["id"]),
                name=str(e.get("name", e["id"])),
                description=str(e.get("description", "")),
                start_time=_whole(e["start_time"], "special_events.start_time"),
                end_time=_whole(e["end_time"], "special_events.end_time"),
                multiplier=multiplier,
                active=False,
            )
        )
    return tuple(out)


def state_from_mapping(d: Mapping[str, Any], *, now: int) -> GameState:
    """Rebuild a GameState from a serialized record.

    Raises ValueError/TypeError/KeyError on malformed input (including
    non-finite numbers, a non-positive prestige threshold or event multiplier,
    and upgrade levels past MAX_UPGRADE_LEVEL); callers fall back to
    default_start_state(). Derived fields are carried as-is and must be
    recomputed (core.offline does that on load).
    """
    if not isinstance(d, Mapping):
        raise TypeError("serialized state must be a mapping")
    p = d.get("prestige") or {}
    if not isinstance(p, Mapping):
        raise TypeError("prestige must be a mapping")
    required = _finite(p.get("resource_required", PrestigeData.resource_required), "prestige.resource_required")
    if required <= 0:
        raise ValueError(f"prestige.resource_required must be > 0, got {required}")
    prestige = PrestigeData(
        level=max(0, _whole(p.get("level", 0), "prestige.level")),
        total_prestige=max(0, _whole(p.get("total_prestige", 0), "prestige.total_prestige")),
        multiplier=max(1.0, _finite(p.get("multiplier", 1.0), "prestige.multiplier")),
        resource_required=required,
    )
    return GameState(
        resource=max(0.0, _finite(d["resource"], "resource")),
        resource_per_second=max(0.0, _finite(d.get("resource_per_second", 0.0), "resource_per_second")),
        resource_per_click=max(0.0, _finite(d.get("resource_per_click", 1.0), "resource_per_click")),
        total_resource_earned=max(0.0, _finite(d.get("total_resource_earned", 0.0), "total_resource_earned")),
        total_clicks=max(0, _whole(d.get("total_clicks", 0), "total_clicks")),
        upgrades=_upgrades_from_mapping(d.get("upgrades")),
        achievements=frozenset(str(x) for x in (d.get("achievements") or [])),
        daily_rewards=_daily_from_list(d.get("daily_rewards")),
        special_events=_events_from_list(d.get("special_events"), anchor=now),
        prestige=prestige,
        last_save_time=_whole(d.get("last_save_time", now), "last_save_time"),
        last_daily_reward_claim_time=_whole(d.get("last_daily_reward_claim_time", 0), "last_daily_reward_claim_time"),
    )
