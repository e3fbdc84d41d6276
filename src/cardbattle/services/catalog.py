"""Read-only lookups over the JSON definition repositories."""
from __future__ import annotations

from pathlib import Path
from typing import List

from cardbattle.data.errors import DataReferenceError
from cardbattle.data.repositories import (
    AchievementsRepository,
    CardsRepository,
    EnemiesRepository,
    LevelsRepository,
)
from cardbattle.domain.defs import AchievementDef, CardDef, EnemyDef, LevelDef


class Catalog:
    """Catalog provider used by the engine; every ``get_*`` returns None when missing."""

    def __init__(
        self,
        cards_repo: CardsRepository,
        enemies_repo: EnemiesRepository,
        levels_repo: LevelsRepository,
        achievements_repo: AchievementsRepository,
    ) -> None:
        self._cards_repo = cards_repo
        self._enemies_repo = enemies_repo
        self._levels_repo = levels_repo
        self._achievements_repo = achievements_repo

    @classmethod
    def from_definitions(cls, base_path: Path | str | None = None) -> "Catalog":
        return cls(
            cards_repo=CardsRepository(base_path),
            enemies_repo=EnemiesRepository(base_path),
            levels_repo=LevelsRepository(base_path),
            achievements_repo=AchievementsRepository(base_path),
        )

    def get_card_by_id(self, card_id: str) -> CardDef | None:
        return self._cards_repo.find(card_id)

    def get_enemy_by_id(self, enemy_id: str) -> EnemyDef | None:
        return self._enemies_repo.find(enemy_id)

    def get_level_by_id(self, level_id: int) -> LevelDef | None:
        return self._levels_repo.find(str(level_id))

    def get_level_by_enemy_id(self, enemy_id: str) -> LevelDef | None:
        for level in self._levels_repo.all():
            if enemy_id in level.enemy_ids:
                return level
        return None

    def get_levels_count(self) -> int:
        return len(self._levels_repo.all())

    def all_cards(self) -> List[CardDef]:
        return self._cards_repo.all()

    def all_levels(self) -> List[LevelDef]:
        return self._levels_repo.all()

    def all_achievements(self) -> List[AchievementDef]:
        return self._achievements_repo.all()

    def starter_deck(self) -> List[str]:
        """Card ids of a new player's deck, expanded by ``starter_copies``."""
        deck: List[str] = []
        for card in self._cards_repo.all():
            deck.extend([card.id] * card.starter_copies)
        return deck

    def validate_references(self) -> None:
        """Raise DataReferenceError when levels name unknown enemies or cards."""
        for level in self._levels_repo.all():
            for enemy_id in level.enemy_ids:
                if self.get_enemy_by_id(enemy_id) is None:
                    raise DataReferenceError(f"Level {level.id} references unknown enemy '{enemy_id}'.")
            for card_id in level.rewards.card_ids:
                if self.get_card_by_id(card_id) is None:
                    raise DataReferenceError(f"Level {level.id} rewards unknown card '{card_id}'.")
        for achievement in self._achievements_repo.all():
            if achievement.condition == "defeat_enemy" and self.get_enemy_by_id(str(achievement.value)) is None:
                raise DataReferenceError(
                    f"Achievement '{achievement.id}' references unknown enemy '{achievement.value}'."
                )
