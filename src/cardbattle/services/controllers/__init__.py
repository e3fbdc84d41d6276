"""UI-agnostic controllers for game flow orchestration."""
from __future__ import annotations

from .battle_controller import BattleAction, BattleActionType, BattleController

__all__ = [
    "BattleAction",
    "BattleActionType",
    "BattleController",
]
