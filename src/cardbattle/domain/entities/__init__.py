"""Runtime entity exports."""

from .combatant import Combatant
from .enemy import EnemyCombatant
from .player import PlayerCombatant

__all__ = [
    "Combatant",
    "EnemyCombatant",
    "PlayerCombatant",
]
