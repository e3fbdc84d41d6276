"""Base combatant model."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from cardbattle.core.types import Side


@dataclass(slots=True)
class Combatant:
    """Health-bearing participant; health stays within [0, max_health]."""

    side: ClassVar[Side]

    name: str
    health: int
    max_health: int

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def health_percent(self) -> float:
        if self.max_health <= 0:
            return 0.0
        return self.health / self.max_health * 100

    def take_damage(self, amount: int) -> int:
        """Subtract health and return the amount actually lost."""
        before = self.health
        self.health = max(0, self.health - max(0, amount))
        return before - self.health

    def heal(self, amount: int) -> int:
        """Restore health up to the maximum and return the amount healed."""
        before = self.health
        self.health = min(self.max_health, self.health + max(0, amount))
        return self.health - before

    def raise_max_health(self, amount: int) -> None:
        self.max_health += amount
        self.health += amount
