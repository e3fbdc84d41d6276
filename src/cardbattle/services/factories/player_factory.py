"""Factory for creating the player combatant from saved progress."""
from __future__ import annotations

from cardbattle.domain.entities import PlayerCombatant
from cardbattle.domain.progression import PlayerProgress


def create_player_combatant(progress: PlayerProgress, name: str = "Hero") -> PlayerCombatant:
    """Build a player at full health and mana from persistent progress."""
    return PlayerCombatant(
        name=name,
        health=progress.max_health,
        max_health=progress.max_health,
        mana=progress.max_mana,
        max_mana=progress.max_mana,
        gold=progress.gold,
        level=progress.level,
        experience=progress.experience,
    )
