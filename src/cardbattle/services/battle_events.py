"""Typed events emitted by every battle transition."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal

from cardbattle.core.types import RejectionReason, Side

DamageKind = Literal["attack", "thorns", "reflect", "effect", "direct", "execute"]


@dataclass(slots=True)
class BattleEvent:
    """Base battle event."""


@dataclass(slots=True)
class BattleStartedEvent(BattleEvent):
    battle_id: str
    level_id: int
    level_name: str
    enemy_name: str


@dataclass(slots=True)
class TurnStartedEvent(BattleEvent):
    side: Side
    turn: int


@dataclass(slots=True)
class TurnEndedEvent(BattleEvent):
    side: Side


@dataclass(slots=True)
class StunnedEvent(BattleEvent):
    """The stunned side loses its action this turn."""

    side: Side
    name: str


@dataclass(slots=True)
class CardDrawnEvent(BattleEvent):
    card_id: str
    card_name: str


@dataclass(slots=True)
class PileRecycledEvent(BattleEvent):
    card_count: int


@dataclass(slots=True)
class CardPlayedEvent(BattleEvent):
    card_id: str
    card_name: str
    mana_cost: int


@dataclass(slots=True)
class CardDiscardedEvent(BattleEvent):
    card_id: str
    card_name: str
    forced: bool = False


@dataclass(slots=True)
class HandTransformedEvent(BattleEvent):
    old_card_ids: List[str]
    new_card_ids: List[str]


@dataclass(slots=True)
class DamageDealtEvent(BattleEvent):
    source: Side | None
    target: Side
    amount: int
    absorbed: int
    target_health: int
    kind: DamageKind = "attack"


@dataclass(slots=True)
class HealedEvent(BattleEvent):
    target: Side
    amount: int
    target_health: int


@dataclass(slots=True)
class EffectAppliedEvent(BattleEvent):
    effect_id: str
    effect_type: str
    value: int
    duration: int
    source: Side
    target: Side


@dataclass(slots=True)
class EffectTickedEvent(BattleEvent):
    effect_id: str
    effect_type: str
    target: Side
    amount: int
    remaining_duration: int


@dataclass(slots=True)
class EffectExpiredEvent(BattleEvent):
    effect_id: str
    effect_type: str
    target: Side


@dataclass(slots=True)
class NextAttackEmpoweredEvent(BattleEvent):
    """The next attack card played deals double damage."""


@dataclass(slots=True)
class EnemyActionEvent(BattleEvent):
    enemy_name: str
    action_name: str
    action_type: str


@dataclass(slots=True)
class ManaChangedEvent(BattleEvent):
    mana: int
    max_mana: int


@dataclass(slots=True)
class StatChangedEvent(BattleEvent):
    side: Side
    stat: str
    old_value: int
    new_value: int


@dataclass(slots=True)
class GoldGainedEvent(BattleEvent):
    amount: int
    total_gold: int


@dataclass(slots=True)
class ExpGainedEvent(BattleEvent):
    amount: int
    total_exp: int


@dataclass(slots=True)
class LevelUpEvent(BattleEvent):
    new_level: int
    max_health: int
    max_mana: int


@dataclass(slots=True)
class LevelUnlockedEvent(BattleEvent):
    level_id: int


@dataclass(slots=True)
class CardRewardedEvent(BattleEvent):
    card_id: str
    card_name: str


@dataclass(slots=True)
class AchievementUnlockedEvent(BattleEvent):
    achievement_id: str
    name: str
    reward_gold: int = 0


@dataclass(slots=True)
class ActionRejectedEvent(BattleEvent):
    """A requested action was refused; battle state is unchanged."""

    reason: RejectionReason
    detail: str = ""


@dataclass(slots=True)
class BattleEndedEvent(BattleEvent):
    victory: bool
    turn_count: int
    progress_saved: bool = False

