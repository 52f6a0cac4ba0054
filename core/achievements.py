"""
core.achievements
Achievement catalog + evaluator.

Conditions are plain data (ConditionKind + parameters) so the catalog stays
serializable; condition_met() is the only place that interprets them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Tuple

from .events import active_events
from .state import GameState


class ConditionKind(str, Enum):
    THRESHOLD = "threshold"
    ANY_UPGRADE_AT_LEVEL = "any_upgrade_at_level"
    ALL_UPGRADES_PURCHASED = "all_upgrades_purchased"
    CLAIMED_DAYS_COUNT = "claimed_days_count"
    ANY_EVENT_ACTIVE = "any_event_active"


@dataclass(frozen=True)
class Condition:
    kind: ConditionKind
    field: str = ""  # THRESHOLD only; dotted path into GameState
    minimum: float = 0.0


@dataclass(frozen=True)
class AchievementDef:
    id: str
    name: str
    description: str
    condition: Condition
    reward: int
    category: str  # clicking | production | upgrades | prestige | special


def _threshold(field: str, minimum: float) -> Condition:
    return Condition(ConditionKind.THRESHOLD, field=field, minimum=float(minimum))


ACHIEVEMENT_CATALOG: Tuple[AchievementDef, ...] = (
    # clicking
    AchievementDef("first_click", "First Click", "Click for the first time", _threshold("total_clicks", 1), 10, "clicking"),
    AchievementDef("click_master", "Click Master", "Click 100 times", _threshold("total_clicks", 100), 50, "clicking"),
    AchievementDef("click_legend", "Click Legend", "Click 1,000 times", _threshold("total_clicks", 1_000), 200, "clicking"),
    AchievementDef("click_god", "Click God", "Click 10,000 times", _threshold("total_clicks", 10_000), 1_000, "clicking"),
    # production
    AchievementDef("first_goon", "First Earnings", "Earn your first resource", _threshold("total_resource_earned", 1), 5, "production"),
    AchievementDef("goon_collector", "Collector", "Earn 1,000 in total", _threshold("total_resource_earned", 1_000), 100, "production"),
    AchievementDef("goon_millionaire", "Millionaire", "Earn 1,000,000 in total", _threshold("total_resource_earned", 1_000_000), 5_000, "production"),
    AchievementDef("speed_demon", "Speed Demon", "Generate 100 per second", _threshold("resource_per_second", 100), 500, "production"),
    # upgrades
    AchievementDef("first_upgrade", "First Upgrade", "Buy your first upgrade", Condition(ConditionKind.ANY_UPGRADE_AT_LEVEL, minimum=1), 25, "upgrades"),
    AchievementDef("upgrade_master", "Upgrade Master", "Reach level 10 on any upgrade", Condition(ConditionKind.ANY_UPGRADE_AT_LEVEL, minimum=10), 250, "upgrades"),
    AchievementDef("all_upgrades", "All Upgrades", "Buy all upgrade types", Condition(ConditionKind.ALL_UPGRADES_PURCHASED), 1_000, "upgrades"),
    # prestige
    AchievementDef("first_prestige", "First Prestige", "Perform your first prestige", _threshold("prestige.total_prestige", 1), 5_000, "prestige"),
    AchievementDef("prestige_master", "Prestige Master", "Reach prestige level 10", _threshold("prestige.level", 10), 25_000, "prestige"),
    # special
    AchievementDef("daily_streak", "Daily Streak", "Claim daily rewards on 7 days", Condition(ConditionKind.CLAIMED_DAYS_COUNT, minimum=7), 1_000, "special"),
    AchievementDef("event_participant", "Event Participant", "Play during a special event", Condition(ConditionKind.ANY_EVENT_ACTIVE), 500, "special"),
)

ACHIEVEMENTS_BY_ID: Dict[str, AchievementDef] = {a.id: a for a in ACHIEVEMENT_CATALOG}


def _read_field(state: GameState, path: str) -> float:
    obj = state
    for part in path.split("."):
        obj = getattr(obj, part)
    return float(obj)


def condition_met(c: Condition, state: GameState, now: int) -> bool:
    if c.kind == ConditionKind.THRESHOLD:
        return _read_field(state, c.field) >= c.minimum
    if c.kind == ConditionKind.ANY_UPGRADE_AT_LEVEL:
        return any(u.level >= c.minimum for u in state.upgrades.values())
    if c.kind == ConditionKind.ALL_UPGRADES_PURCHASED:
        return bool(state.upgrades) and all(u.level > 0 for u in state.upgrades.values())
    if c.kind == ConditionKind.CLAIMED_DAYS_COUNT:
        return sum(1 for r in state.daily_rewards if r.claimed) >= c.minimum
    if c.kind == ConditionKind.ANY_EVENT_ACTIVE:
        return bool(active_events(state.special_events, now))
    raise ValueError(f"Unknown condition kind: {c.kind!r}")


def newly_unlocked(state: GameState, now: int) -> List[AchievementDef]:
    """Catalog-ordered defs that hold now and have not fired yet."""
    return [a for a in ACHIEVEMENT_CATALOG if a.id not in state.achievements and condition_met(a.condition, state, now)]


def unlock_achievement(state: GameState, achievement_id: str) -> GameState:
    """Idempotent: an already-unlocked id is a no-op, a first unlock credits the reward."""
    a = ACHIEVEMENTS_BY_ID.get(str(achievement_id))
    if a is None:
        raise ValueError(f"Unknown achievement_id: {achievement_id}")
    if a.id in state.achievements:
        return state
    return replace(
        state,
        achievements=state.achievements | {a.id},
        resource=float(state.resource) + a.reward,
    )


def evaluate_achievements(state: GameState, now: int) -> Tuple[GameState, List[AchievementDef]]:
    fired = newly_unlocked(state, now)
    s = state
    for a in fired:
        s = unlock_achievement(s, a.id)
    return s, fired


def unlocked_achievements(state: GameState) -> List[AchievementDef]:
    return [a for a in ACHIEVEMENT_CATALOG if a.id in state.achievements]
