"""Deterministic identifiers for battles."""
from __future__ import annotations

from cardbattle.core.rng import RNG


def make_battle_id(level_id: int, rng: RNG) -> str:
    """Return ``battle_<level>_<hex>`` drawn from the battle RNG.

    Drawing from the same RNG keeps a seeded battle fully reproducible.
    """
    return f"battle_{level_id}_{rng.randint(0, 0xFFFFFF):06x}"
