"""Repository exports."""

from .achievements_repo import AchievementsRepository
from .cards_repo import CardsRepository
from .enemies_repo import EnemiesRepository
from .levels_repo import LevelsRepository

__all__ = [
    "AchievementsRepository",
    "CardsRepository",
    "EnemiesRepository",
    "LevelsRepository",
]
