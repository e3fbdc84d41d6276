"""Levels repository."""
from __future__ import annotations

from typing import Dict

from cardbattle.data.errors import DataValidationError
from cardbattle.data.repositories.base import RepositoryBase
from cardbattle.domain.defs import LevelDef, LevelRewards


class LevelsRepository(RepositoryBase[LevelDef]):
    """Loads level definitions keyed by their numeric id."""

    def __init__(self, base_path=None) -> None:
        super().__init__("levels.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, LevelDef]:
        levels: Dict[str, LevelDef] = {}
        for raw_id, payload in raw.items():
            context = f"level '{raw_id}'"
            try:
                level_id = int(raw_id)
            except ValueError as exc:
                raise DataValidationError(f"{context} id must be an integer string.") from exc
            level_data = self._require_mapping(payload, context)
            self._assert_required(level_data, {"name", "enemies", "rewards"}, context)

            enemy_ids = self._require_str_list(level_data["enemies"], f"{context} enemies")
            if not enemy_ids:
                raise DataValidationError(f"{context} must list at least one enemy.")

            rewards_data = self._require_mapping(level_data["rewards"], f"{context} rewards")
            rewards = LevelRewards(
                gold=self._require_int(rewards_data.get("gold", 0), f"{context} rewards gold"),
                experience=self._require_int(rewards_data.get("experience", 0), f"{context} rewards experience"),
                card_ids=tuple(self._require_str_list(rewards_data.get("cards", []), f"{context} rewards cards")),
            )
            levels[str(level_id)] = LevelDef(
                id=level_id,
                name=self._require_str(level_data["name"], f"{context} name"),
                description=self._require_str(level_data.get("description", ""), f"{context} description"),
                enemy_ids=tuple(enemy_ids),
                rewards=rewards,
            )
        return levels

    def get_level(self, level_id: int) -> LevelDef:
        return self.get(str(level_id))

    def all(self) -> list[LevelDef]:
        """Return all levels in numeric order."""
        return sorted(self._ensure_loaded().values(), key=lambda level: level.id)
