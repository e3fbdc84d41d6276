"""UI-agnostic battle controller that separates state progression from rendering."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal

from cardbattle.domain.battle_models import BattleContext
from cardbattle.services.battle_events import BattleEvent
from cardbattle.services.battle_service import BattleService, BattleView


BattleActionType = Literal["play", "discard", "end_turn"]


@dataclass(slots=True)
class BattleAction:
    """Represents a structured action decision from the player."""

    action_type: BattleActionType
    hand_index: int | None = None


class BattleController:
    """
    UI-agnostic controller for battle state progression.

    This controller wraps BattleService and exposes only structured state and actions.
    It does NOT handle rendering, formatting, or input prompts.

    Responsibilities:
    - Translate player actions into service calls
    - Run the enemy turn whenever the player's turn has ended
    - Report whether the player can act

    Non-responsibilities (handled by presentation layer):
    - Rendering views or events
    - Prompting for user input
    """

    def __init__(self, battle_service: BattleService) -> None:
        self._service = battle_service

    def get_battle_view(self, ctx: BattleContext) -> BattleView:
        """Return structured view of current battle state for rendering."""
        return self._service.get_battle_view(ctx)

    def is_player_turn(self, ctx: BattleContext) -> bool:
        return not ctx.state.is_game_over and ctx.state.phase == "player_acting"

    def is_enemy_turn(self, ctx: BattleContext) -> bool:
        return not ctx.state.is_game_over and ctx.state.phase == "enemy_turn_start"

    def is_battle_over(self, ctx: BattleContext) -> bool:
        return ctx.state.is_game_over

    def apply_player_action(self, ctx: BattleContext, action: BattleAction) -> List[BattleEvent]:
        """
        Apply a player action, then any enemy turns it hands over to.

        This method does NOT print or format anything. It only executes game logic.
        """
        if action.action_type == "play":
            if action.hand_index is None:
                raise ValueError("Play action requires hand_index.")
            events = self._service.play_card(ctx, action.hand_index)
        elif action.action_type == "discard":
            if action.hand_index is None:
                raise ValueError("Discard action requires hand_index.")
            events = self._service.discard_card(ctx, action.hand_index)
        elif action.action_type == "end_turn":
            events = self._service.end_player_turn(ctx)
        else:
            raise ValueError(f"Unknown action type: {action.action_type}")
        events.extend(self.run_enemy_turns(ctx))
        return events

    def run_enemy_turns(self, ctx: BattleContext) -> List[BattleEvent]:
        """Resolve enemy turns until the player can act or the battle ends.

        A stunned player hands the turn straight back, so more than one enemy
        turn can run here.
        """
        events: List[BattleEvent] = []
        while self.is_enemy_turn(ctx):
            events.extend(self._service.resolve_enemy_turn(ctx))
        return events
