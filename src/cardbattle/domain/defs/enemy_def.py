"""Enemy definition structures.

Enemy behaviour is a closed union of action variants. Each variant carries
only the fields it needs; an optional condition gates it in action-list mode.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple, Union

ConditionKind = Literal["health_below", "health_above", "player_health_below", "turn_count", "random"]
SpecialKind = Literal["multi_attack", "summon", "life_steal", "execute_below", "discard"]


@dataclass(frozen=True, slots=True)
class ActionCondition:
    """Gate for an action in action-list mode."""

    kind: ConditionKind
    value: float


@dataclass(frozen=True, slots=True)
class AttackAction:
    name: str
    value: int | None = None
    multiplier: int = 1
    effect: str | None = None
    effect_value: int | None = None
    effect_duration: int | None = None
    condition: ActionCondition | None = None


@dataclass(frozen=True, slots=True)
class HealAction:
    name: str
    value: int | None = None
    condition: ActionCondition | None = None


@dataclass(frozen=True, slots=True)
class BuffAction:
    name: str
    buff: str
    value: int | None = None
    duration: int | None = None
    condition: ActionCondition | None = None


@dataclass(frozen=True, slots=True)
class DebuffAction:
    name: str
    debuff: str
    value: int | None = None
    duration: int | None = None
    condition: ActionCondition | None = None


@dataclass(frozen=True, slots=True)
class SpecialAction:
    name: str
    special: SpecialKind
    value: int | None = None
    count: int | None = None
    steal_percent: int | None = None
    threshold: int | None = None
    condition: ActionCondition | None = None


EnemyAction = Union[AttackAction, HealAction, BuffAction, DebuffAction, SpecialAction]


@dataclass(frozen=True, slots=True)
class EnemyDef:
    """Enemy catalog entry."""

    id: str
    name: str
    health: int
    attack: int
    description: str = ""
    actions: Tuple[EnemyAction, ...] = ()
    patterns: Tuple[EnemyAction, ...] = ()
