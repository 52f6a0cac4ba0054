"""engine.notices

Notice feed for UI / notification collaborators.

notices_between() diffs two snapshots; the engine never pushes anything.
Delivery and display are up to the consumer.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Tuple

from core.achievements import ACHIEVEMENTS_BY_ID
from core.catalog import UPGRADES_BY_ID
from core.daily import current_claimable_day
from core.events import is_active
from core.fmt import format_number
from core.state import GameState

MAX_NOTICES = 50


@dataclass(frozen=True)
class Notice:
    kind: str
    title: str
    message: str
    timestamp: int
    read: bool = False


def notices_between(before: GameState, after: GameState, now: int, since: int) -> List[Notice]:
    """Notices for what changed from `before` (observed at `since`) to `after` (at `now`)."""
    out: List[Notice] = []

    for aid in sorted(after.achievements - before.achievements):
        a = ACHIEVEMENTS_BY_ID.get(aid)
        if a is None:
            continue
        out.append(Notice("achievement", "Achievement Unlocked!", f'You\'ve unlocked "{a.name}" and earned {format_number(a.reward)}!', now))

    if after.prestige.total_prestige > before.prestige.total_prestige:
        out.append(
            Notice(
                "prestige",
                "Prestige Complete!",
                f"Prestige level {after.prestige.level} achieved! You now have a {after.prestige.multiplier:g}x multiplier!",
                now,
            )
        )
    else:
        for uid, u in after.upgrades.items():
            prev = before.upgrades.get(uid)
            if prev is not None and u.level > prev.level:
                name = UPGRADES_BY_ID[uid].name if uid in UPGRADES_BY_ID else uid
                out.append(Notice("upgrade", "Upgrade Purchased!", f"{name} upgraded to level {u.level}!", now))

    for e in after.special_events:
        if is_active(e, now) and not is_active(e, since):
            out.append(Notice("special_event", "Special Event!", f"{e.name}: {e.description}", now))

    day_after = current_claimable_day(after.last_daily_reward_claim_time, now)
    day_before = current_claimable_day(before.last_daily_reward_claim_time, since)
    if day_after > 0 and day_after != day_before:
        slot = next((r for r in after.daily_rewards if r.day == day_after), None)
        if slot is not None and not slot.claimed:
            out.append(
                Notice(
                    "daily_reward",
                    "Daily Reward Available!",
                    f"Day {day_after} reward is ready! Claim {format_number(slot.reward + slot.bonus)}!",
                    now,
                )
            )
    return out


def push(feed: Tuple[Notice, ...], new: List[Notice]) -> Tuple[Notice, ...]:
    """Newest first, capped at MAX_NOTICES."""
    return tuple(list(reversed(new)) + list(feed))[:MAX_NOTICES]


def mark_all_read(feed: Tuple[Notice, ...]) -> Tuple[Notice, ...]:
    return tuple(n if n.read else replace(n, read=True) for n in feed)


def unread_count(feed: Tuple[Notice, ...]) -> int:
    return sum(1 for n in feed if not n.read)
