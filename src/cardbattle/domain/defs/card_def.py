"""Card definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from cardbattle.core.types import CardType


@dataclass(frozen=True, slots=True)
class EffectGrantDef:
    """Secondary effect granted when a card resolves."""

    kind: str
    value: int = 0
    duration: int | None = None
    status: str | None = None


@dataclass(frozen=True, slots=True)
class CardDef:
    """Immutable catalog entry for a playable card."""

    id: str
    name: str
    card_type: CardType
    mana_cost: int
    value: int
    description: str = ""
    effect: str | None = None
    effect_value: int | None = None
    effect_duration: int | None = None
    effects: Tuple[EffectGrantDef, ...] = ()
    starter_copies: int = 0
