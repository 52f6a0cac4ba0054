"""
core.events
Special event scheduler: fixed catalog of time-windowed multipliers.

Category is looked up from the event id (EVENT_CATEGORIES), never stored.
For the "upgrades" category the multiplier is a price divisor.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Tuple

from .state import SpecialEvent

HOUR_MS = 60 * 60 * 1000

CATEGORIES = ("production", "clicking", "upgrades", "prestige")


@dataclass(frozen=True)
class EventDef:
    id: str
    name: str
    description: str
    start_offset_ms: int  # relative to the new-game anchor
    end_offset_ms: int
    multiplier: float


EVENT_CATALOG: Tuple[EventDef, ...] = (
    EventDef("double_goons", "Double Production Weekend", "All production is doubled!", 24 * HOUR_MS, 72 * HOUR_MS, 2.0),
    EventDef("click_frenzy", "Click Frenzy", "Clicking produces 5x more!", 48 * HOUR_MS, 60 * HOUR_MS, 5.0),
    EventDef("upgrade_discount", "Upgrade Sale", "All upgrades are 50% off!", 96 * HOUR_MS, 120 * HOUR_MS, 2.0),
    EventDef("prestige_boost", "Prestige Boost", "Prestige gives 3x more multiplier!", 144 * HOUR_MS, 168 * HOUR_MS, 3.0),
)

EVENT_CATEGORIES: Dict[str, str] = {
    "double_goons": "production",
    "click_frenzy": "clicking",
    "upgrade_discount": "upgrades",
    "prestige_boost": "prestige",
}


def schedule_events(anchor: int) -> Tuple[SpecialEvent, ...]:
    """Absolute-time event instances for a game started at `anchor` (ms)."""
    return tuple(
        SpecialEvent(
            id=d.id,
            name=d.name,
            description=d.description,
            start_time=int(anchor) + d.start_offset_ms,
            end_time=int(anchor) + d.end_offset_ms,
            multiplier=float(d.multiplier),
            active=False,
        )
        for d in EVENT_CATALOG
    )


def category_of(event_id: str) -> str:
    return EVENT_CATEGORIES.get(str(event_id), "")


def is_active(event: SpecialEvent, now: int) -> bool:
    return int(event.start_time) <= int(now) < int(event.end_time)


def active_events(events: Iterable[SpecialEvent], now: int) -> List[SpecialEvent]:
    return [e for e in events if is_active(e, now)]


def multiplier_for(events: Iterable[SpecialEvent], category: str, now: int) -> float:
    """Product of multipliers of active events in `category` (1.0 if none)."""
    m = 1.0
    for e in active_events(events, now):
        if category_of(e.id) == category:
            m *= float(e.multiplier)
    return m


def sync_event_flags(events: Iterable[SpecialEvent], now: int) -> Tuple[SpecialEvent, ...]:
    out = []
    for e in events:
        flag = is_active(e, now)
        out.append(e if e.active == flag else replace(e, active=flag))
    return tuple(out)
