"""Domain definition exports."""

from .achievement_def import AchievementDef
from .card_def import CardDef, EffectGrantDef
from .enemy_def import (
    ActionCondition,
    AttackAction,
    BuffAction,
    DebuffAction,
    EnemyAction,
    EnemyDef,
    HealAction,
    SpecialAction,
)
from .level_def import LevelDef, LevelRewards

__all__ = [
    "AchievementDef",
    "ActionCondition",
    "AttackAction",
    "BuffAction",
    "CardDef",
    "DebuffAction",
    "EffectGrantDef",
    "EnemyAction",
    "EnemyDef",
    "HealAction",
    "LevelDef",
    "LevelRewards",
    "SpecialAction",
]
