"""Achievement definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

AchievementConditionKind = Literal[
    "battles_won",
    "cards_collected",
    "total_damage",
    "total_healing",
    "total_gold",
    "cards_played",
    "player_level",
    "all_levels_unlocked",
    "defeat_enemy",
]


@dataclass(frozen=True, slots=True)
class AchievementDef:
    """Describes a milestone checked after each victory."""

    id: str
    name: str
    description: str
    condition: AchievementConditionKind
    value: int | str
    reward_gold: int = 0
