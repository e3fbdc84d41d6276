"""Three-zone card lifecycle: draw pile, hand and discard pile."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, List

from cardbattle.core.rng import RNG
from cardbattle.domain.defs import CardDef


class InvalidHandIndexError(IndexError):
    """Raised when a hand index is outside the current hand."""

    def __init__(self, index: int, hand_size: int) -> None:
        super().__init__(f"Hand index {index} is out of range for a hand of {hand_size}.")
        self.index = index
        self.hand_size = hand_size


@dataclass(slots=True)
class DrawResult:
    """Cards drawn by one call and where the discard pile was recycled, if at all."""

    drawn: List[CardDef] = field(default_factory=list)
    recycled: int = 0
    recycled_cards: int = 0
    recycled_after: int | None = None


@dataclass(slots=True)
class DeckZones:
    """Card instances owned by one battle.

    The top of the draw pile is the end of the list. Every zone holds its own
    card instances, so two copies of one card id are distinct objects.
    """

    draw_pile: List[CardDef] = field(default_factory=list)
    hand: List[CardDef] = field(default_factory=list)
    discard_pile: List[CardDef] = field(default_factory=list)

    @classmethod
    def from_cards(cls, cards: Iterable[CardDef], rng: RNG) -> "DeckZones":
        """Build a shuffled draw pile holding a distinct instance per card."""
        zones = cls(draw_pile=[replace(card) for card in cards])
        rng.shuffle(zones.draw_pile)
        return zones

    def all_cards(self) -> List[CardDef]:
        return [*self.draw_pile, *self.hand, *self.discard_pile]

    def _recycle(self, rng: RNG) -> None:
        self.draw_pile.extend(self.discard_pile)
        self.discard_pile.clear()
        rng.shuffle(self.draw_pile)

    def _draw_one(self, rng: RNG, result: DrawResult) -> bool:
        if not self.draw_pile:
            if not self.discard_pile:
                return False
            result.recycled += 1
            result.recycled_cards += len(self.discard_pile)
            if result.recycled_after is None:
                result.recycled_after = len(result.drawn)
            self._recycle(rng)
        card = self.draw_pile.pop()
        self.hand.append(card)
        result.drawn.append(card)
        return True

    def draw_to_hand_size(self, rng: RNG, target: int = 5) -> DrawResult:
        """Fill the hand up to ``target``; a partial hand is valid."""
        result = DrawResult()
        while len(self.hand) < target:
            if not self._draw_one(rng, result):
                break
        return result

    def draw(self, rng: RNG, count: int) -> DrawResult:
        """Draw at most ``count`` cards regardless of hand size."""
        result = DrawResult()
        for _ in range(max(0, count)):
            if not self._draw_one(rng, result):
                break
        return result

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.hand):
            raise InvalidHandIndexError(index, len(self.hand))

    def card_at(self, index: int) -> CardDef:
        self._check_index(index)
        return self.hand[index]

    def discard(self, index: int) -> CardDef:
        """Move the card at ``index`` from hand to the discard pile."""
        self._check_index(index)
        card = self.hand.pop(index)
        self.discard_pile.append(card)
        return card

    def replace_in_hand(self, index: int, card: CardDef) -> CardDef:
        """Swap a hand card for ``card`` and return the card it replaced."""
        self._check_index(index)
        previous = self.hand[index]
        self.hand[index] = card
        return previous
