"""Factory helpers for runtime entities."""

from .enemy_factory import create_enemy_combatant
from .id_factory import make_battle_id
from .player_factory import create_player_combatant

__all__ = [
    "create_enemy_combatant",
    "create_player_combatant",
    "make_battle_id",
]
