"""Shared type aliases for the core and domain layers."""
from typing import Literal

Side = Literal["player", "enemy"]
CardType = Literal["attack", "defense", "skill", "item"]
BattlePhase = Literal[
    "player_turn_start",
    "player_acting",
    "player_turn_end",
    "enemy_turn_start",
    "enemy_acting",
    "enemy_turn_end",
    "battle_over",
]
RejectionReason = Literal[
    "invalid_index",
    "insufficient_mana",
    "disarmed",
    "not_player_turn",
    "not_enemy_turn",
    "battle_over",
]


def opponent_of(side: Side) -> Side:
    """Return the other side of the battle."""
    return "enemy" if side == "player" else "player"


__all__ = ["BattlePhase", "CardType", "RejectionReason", "Side", "opponent_of"]
