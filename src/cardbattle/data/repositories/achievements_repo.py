"""Achievements repository."""
from __future__ import annotations

from typing import Dict

from cardbattle.data.repositories.base import RepositoryBase
from cardbattle.domain.defs import AchievementDef

VALID_CONDITIONS = {
    "battles_won",
    "cards_collected",
    "total_damage",
    "total_healing",
    "total_gold",
    "cards_played",
    "player_level",
    "all_levels_unlocked",
    "defeat_enemy",
}


class AchievementsRepository(RepositoryBase[AchievementDef]):
    """Loads achievement definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("achievements.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, AchievementDef]:
        achievements: Dict[str, AchievementDef] = {}
        for raw_id, payload in raw.items():
            context = f"achievement '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_required(data, {"name", "condition"}, context)
            condition = self._require_mapping(data["condition"], f"{context} condition")
            self._assert_required(condition, {"type", "value"}, f"{context} condition")
            kind = self._require_literal(condition["type"], VALID_CONDITIONS, f"{context} condition type")
            if kind == "defeat_enemy":
                value: int | str = self._require_str(condition["value"], f"{context} condition value")
            else:
                value = self._require_int(condition["value"], f"{context} condition value")
            achievements[raw_id] = AchievementDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data.get("description", ""), f"{context} description"),
                condition=kind,
                value=value,
                reward_gold=self._require_int(data.get("reward_gold", 0), f"{context} reward_gold"),
            )
        return achievements
