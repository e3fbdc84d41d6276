"""Player combatant model."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from cardbattle.core.types import Side

from .combatant import Combatant


@dataclass(slots=True)
class PlayerCombatant(Combatant):
    """The deck-wielding side of a battle."""

    side: ClassVar[Side] = "player"

    mana: int = 0
    max_mana: int = 0
    gold: int = 0
    level: int = 1
    experience: int = 0

    def spend_mana(self, amount: int) -> bool:
        if self.mana < amount:
            return False
        self.mana -= amount
        return True

    def restore_mana(self, amount: int) -> int:
        before = self.mana
        self.mana = min(self.max_mana, self.mana + max(0, amount))
        return self.mana - before

    def raise_max_mana(self, amount: int) -> None:
        self.max_mana += amount
        self.mana += amount
