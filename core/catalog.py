"""
core.catalog
Upgrade definitions (static data).

Kept in core so balancing lives in one place, but UI can still display labels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


CLICK_POWER = "clickPower"

# resource_per_click gained per clickPower level (before prestige/event scaling)
CLICK_POWER_UNIT_EFFECT = 1.0

COST_GROWTH = 1.15


@dataclass(frozen=True)
class UpgradeDef:
    id: str
    name: str
    desc: str
    base_cost: int
    base_effect: float


UPGRADE_CATALOG: Tuple[UpgradeDef, ...] = (
    UpgradeDef(CLICK_POWER, "Click Power", "Increase resource per click", 10, 1.0),
    UpgradeDef("autoClicker", "Auto Clicker", "Automatically generates resource per second", 50, 1.0),
    UpgradeDef("goonFactory", "Factory", "Mass produce resource automatically", 200, 5.0),
    UpgradeDef("goonMine", "Mine", "Extract resource from deep underground", 1_000, 20.0),
    UpgradeDef("goonBank", "Bank", "Invest resource for massive returns", 5_000, 100.0),
    UpgradeDef("goonTemple", "Temple", "Sacred production facility", 25_000, 500.0),
    UpgradeDef("goonLab", "Lab", "Advanced research facility", 100_000, 2_000.0),
    UpgradeDef("goonPortal", "Portal", "Interdimensional gateway", 500_000, 10_000.0),
)

UPGRADES_BY_ID: Dict[str, UpgradeDef] = {d.id: d for d in UPGRADE_CATALOG}


def get_upgrade_def(upgrade_id: str) -> UpgradeDef:
    from .errors import UnknownUpgradeError

    d = UPGRADES_BY_ID.get(str(upgrade_id))
    if d is None:
        raise UnknownUpgradeError(upgrade_id)
    return d
