"""Builders for hand-assembled battles and throwaway definition catalogs."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Sequence

from cardbattle.core.rng import RNG
from cardbattle.domain.battle_models import BattleContext, BattleState
from cardbattle.domain.deck import DeckZones
from cardbattle.domain.defs import CardDef, EnemyAction, EnemyDef, LevelDef, LevelRewards
from cardbattle.domain.entities import PlayerCombatant
from cardbattle.services.catalog import Catalog
from cardbattle.services.factories import create_enemy_combatant

STRIKE = CardDef(id="strike", name="Strike", card_type="attack", mana_cost=1, value=6)
DEFEND = CardDef(id="defend", name="Defend", card_type="defense", mana_cost=1, value=5)
POISON_BLADE = CardDef(
    id="poison_blade",
    name="Poison Blade",
    card_type="attack",
    mana_cost=1,
    value=4,
    effect="poison",
    effect_value=2,
    effect_duration=3,
)


def make_enemy_def(
    health: int = 20,
    attack: int = 5,
    *,
    actions: Sequence[EnemyAction] = (),
    patterns: Sequence[EnemyAction] = (),
) -> EnemyDef:
    return EnemyDef(
        id="dummy",
        name="Training Dummy",
        health=health,
        attack=attack,
        actions=tuple(actions),
        patterns=tuple(patterns),
    )


def make_ctx(
    *,
    hand: Sequence[CardDef] = (),
    draw_pile: Sequence[CardDef] = (),
    discard_pile: Sequence[CardDef] = (),
    enemy_def: EnemyDef | None = None,
    player_health: int = 50,
    mana: int = 3,
    seed: int = 7,
) -> BattleContext:
    """Return a battle in the player's acting phase of turn 1."""
    enemy_def = enemy_def or make_enemy_def()
    level = LevelDef(
        id=1,
        name="Test Grounds",
        description="",
        enemy_ids=(enemy_def.id,),
        rewards=LevelRewards(gold=10, experience=10),
    )
    return BattleContext(
        battle_id="battle_test",
        level=level,
        player=PlayerCombatant(
            name="Hero", health=player_health, max_health=player_health, mana=mana, max_mana=mana
        ),
        enemy=create_enemy_combatant(enemy_def),
        enemy_def=enemy_def,
        deck=DeckZones(draw_pile=list(draw_pile), hand=list(hand), discard_pile=list(discard_pile)),
        rng=RNG(seed),
        state=BattleState(turn_count=1, phase="player_acting"),
    )


_DEFAULT_CARDS: Dict[str, Any] = {
    "strike": {"name": "Strike", "type": "attack", "mana_cost": 1, "value": 6, "starter_copies": 4},
    "defend": {"name": "Defend", "type": "defense", "mana_cost": 1, "value": 5, "starter_copies": 3},
    "poison_blade": {
        "name": "Poison Blade",
        "type": "attack",
        "mana_cost": 1,
        "value": 4,
        "effect": "poison",
        "effect_value": 2,
        "effect_duration": 3,
    },
}


def write_definitions(
    base: Path,
    *,
    cards: Dict[str, Any] | None = None,
    enemies: Dict[str, Any] | None = None,
    levels: Dict[str, Any] | None = None,
    achievements: Dict[str, Any] | None = None,
) -> Path:
    """Write a small definitions directory and return its path."""
    enemies = enemies or {"dummy": {"name": "Training Dummy", "health": 20, "attack": 5}}
    levels = levels or {
        "1": {
            "name": "Yard",
            "description": "First steps.",
            "enemies": ["dummy"],
            "rewards": {"gold": 50, "experience": 20, "cards": ["poison_blade"]},
        },
        "2": {
            "name": "Barn",
            "description": "Second steps.",
            "enemies": ["dummy"],
            "rewards": {"gold": 80, "experience": 30},
        },
    }
    achievements = achievements or {
        "first_victory": {
            "name": "First Victory",
            "description": "Win a battle.",
            "condition": {"type": "battles_won", "value": 1},
            "reward_gold": 5,
        }
    }
    base.mkdir(parents=True, exist_ok=True)
    for filename, payload in (
        ("cards.json", cards or _DEFAULT_CARDS),
        ("enemies.json", enemies),
        ("levels.json", levels),
        ("achievements.json", achievements),
    ):
        (base / filename).write_text(json.dumps(payload), encoding="utf-8")
    return base


def make_catalog(base: Path, **overrides: Any) -> Catalog:
    return Catalog.from_definitions(write_definitions(base, **overrides))
