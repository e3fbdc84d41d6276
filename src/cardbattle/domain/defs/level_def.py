"""Level and reward definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class LevelRewards:
    gold: int
    experience: int
    card_ids: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class LevelDef:
    """A level pits the player against the first enemy in ``enemy_ids``."""

    id: int
    name: str
    description: str
    enemy_ids: Tuple[str, ...]
    rewards: LevelRewards
