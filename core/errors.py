"""
core.errors
Engine error taxonomy.

All of these are local and recoverable. Core functions never mutate their
input, so raising always leaves the caller's snapshot intact.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for recoverable engine errors."""


class InsufficientResourceError(EngineError):
    def __init__(self, upgrade_id: str, cost: float, balance: float) -> None:
        self.upgrade_id = upgrade_id
        self.cost = float(cost)
        self.balance = float(balance)
        super().__init__(f"{upgrade_id}: need {self.cost:g}, have {self.balance:g}")


class PrestigeNotEligibleError(EngineError):
    def __init__(self, resource: float, required: float) -> None:
        self.resource = float(resource)
        self.required = float(required)
        super().__init__(f"prestige requires {self.required:g}, have {self.resource:g}")


class ClaimNotAvailableError(EngineError):
    def __init__(self, day: int, claimable_day: int, reason: str) -> None:
        self.day = int(day)
        self.claimable_day = int(claimable_day)
        self.reason = reason
        super().__init__(f"day {self.day} not claimable ({reason}); claimable day: {self.claimable_day}")


class UnknownUpgradeError(EngineError, KeyError):
    def __init__(self, upgrade_id: str) -> None:
        self.upgrade_id = str(upgrade_id)
        super().__init__(f"Unknown upgrade_id: {upgrade_id}")

    def __str__(self) -> str:
        return str(self.args[0])


class PersistenceUnavailable(EngineError):
    """Load/save failed. Never fatal: callers keep in-memory state."""
