"""Battle domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

from cardbattle.core.rng import RNG
from cardbattle.core.types import BattlePhase, Side
from cardbattle.domain.deck import DeckZones
from cardbattle.domain.defs import EnemyDef, LevelDef
from cardbattle.domain.effects import ActiveEffect
from cardbattle.domain.entities import Combatant, EnemyCombatant, PlayerCombatant
from cardbattle.domain.progression import PlayerProgress

BattleOutcome = Literal["victory", "defeat"]


@dataclass(slots=True)
class BattleStatistics:
    """Numbers accrued during one battle and folded into progress at the end."""

    damage_dealt: int = 0
    healing: int = 0
    gold_earned: int = 0
    cards_played: int = 0


@dataclass(slots=True)
class BattleState:
    """Tracks the turn flow of an ongoing battle."""

    is_player_turn: bool = True
    is_game_over: bool = False
    is_victory: bool = False
    turn_count: int = 0
    phase: BattlePhase = "player_turn_start"
    active_effects: List[ActiveEffect] = field(default_factory=list)


@dataclass(slots=True)
class BattleContext:
    """Everything one battle owns; passed explicitly to every pipeline."""

    battle_id: str
    level: LevelDef
    player: PlayerCombatant
    enemy: EnemyCombatant
    enemy_def: EnemyDef
    deck: DeckZones
    rng: RNG
    state: BattleState = field(default_factory=BattleState)
    stats: BattleStatistics = field(default_factory=BattleStatistics)
    hand_size: int = 5
    double_next_attack: bool = False
    effect_counter: int = 0
    progress: PlayerProgress | None = None
    # turn the player last lost to a stun; a stun on the very next turn is shrugged off
    last_stunned_turn: int | None = None

    @property
    def effects(self) -> List[ActiveEffect]:
        return self.state.active_effects

    def combatant(self, side: Side) -> Combatant:
        return self.player if side == "player" else self.enemy

    def next_effect_id(self) -> str:
        self.effect_counter += 1
        return f"{self.battle_id}_fx{self.effect_counter}"

    def outcome(self) -> BattleOutcome | None:
        if not self.state.is_game_over:
            return None
        return "victory" if self.state.is_victory else "defeat"
