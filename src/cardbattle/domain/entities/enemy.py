"""Enemy combatant model."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from cardbattle.core.types import Side

from .combatant import Combatant


@dataclass(slots=True)
class EnemyCombatant(Combatant):
    """Represents a spawned enemy ready for battle."""

    side: ClassVar[Side] = "enemy"

    enemy_id: str = ""
    attack: int = 0
    base_attack: int = 0
