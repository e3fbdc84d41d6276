"""Factory for creating enemy combatants from definitions."""
from __future__ import annotations

from cardbattle.domain.defs import EnemyDef
from cardbattle.domain.entities import EnemyCombatant


def create_enemy_combatant(enemy_def: EnemyDef) -> EnemyCombatant:
    """Instantiate a full-health enemy for a new battle."""
    return EnemyCombatant(
        name=enemy_def.name,
        health=enemy_def.health,
        max_health=enemy_def.health,
        enemy_id=enemy_def.id,
        attack=enemy_def.attack,
        base_attack=enemy_def.attack,
    )
