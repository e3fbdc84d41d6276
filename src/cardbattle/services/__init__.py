"""Service layer exports."""

from .errors import BattleSetupError, SaveLoadError
from .catalog import Catalog
from .battle_service import BattleService, BattleView
from .progression_service import ProgressionService
from .save_service import ProgressStore, SaveService

__all__ = [
    "BattleSetupError",
    "SaveLoadError",
    "Catalog",
    "BattleService",
    "BattleView",
    "ProgressionService",
    "ProgressStore",
    "SaveService",
]
