"""Battle service driving the turn state machine of a card battle."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from cardbattle.core.config import EngineConfig
from cardbattle.core.rng import RNG
from cardbattle.core.types import BattlePhase, RejectionReason, Side
from cardbattle.domain.battle_models import BattleContext, BattleState
from cardbattle.domain.deck import DeckZones
from cardbattle.domain.defs import CardDef
from cardbattle.domain.effects import describe_effect, effects_of, find_effect
from cardbattle.domain.progression import PlayerProgress
from cardbattle.services import card_resolution, enemy_ai
from cardbattle.services import combat_pipeline as pipeline
from cardbattle.services.battle_events import (
    ActionRejectedEvent,
    BattleEndedEvent,
    BattleEvent,
    BattleStartedEvent,
    CardDiscardedEvent,
    ManaChangedEvent,
    StunnedEvent,
    TurnEndedEvent,
    TurnStartedEvent,
)
from cardbattle.services.catalog import Catalog
from cardbattle.services.errors import BattleSetupError
from cardbattle.services.factories import create_enemy_combatant, create_player_combatant, make_battle_id
from cardbattle.services.progression_service import ProgressionService
from cardbattle.services.save_service import ProgressStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CombatantView:
    name: str
    health: int
    max_health: int
    effects: List[str]


@dataclass(slots=True)
class HandCardView:
    index: int
    card_id: str
    name: str
    card_type: str
    mana_cost: int
    description: str
    playable: bool


@dataclass(slots=True)
class BattleView:
    """Presentation view for the current battle state."""

    battle_id: str
    level_name: str
    turn: int
    phase: BattlePhase
    player: CombatantView
    mana: int
    max_mana: int
    enemy: CombatantView
    enemy_attack: int
    enemy_intent: str | None
    hand: List[HandCardView]
    draw_pile_size: int
    discard_pile_size: int
    double_next_attack: bool


class BattleService:
    """Deterministic card battle orchestrator.

    Every transition returns the ordered events it produced. Refused actions
    come back as a single ``ActionRejectedEvent`` and leave the battle as it was.
    """

    def __init__(
        self,
        catalog: Catalog,
        progress_store: ProgressStore | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self._catalog = catalog
        self._progress_store = progress_store
        self._config = config or EngineConfig()
        self._progression = ProgressionService(catalog, self._config)

    # -----------------------
    # Battle Lifecycle
    # -----------------------
    def start_battle(
        self, level_id: int, progress: PlayerProgress, rng: RNG
    ) -> Tuple[BattleContext, List[BattleEvent]]:
        """Build a battle for ``level_id`` and run the first player turn start."""
        level = self._catalog.get_level_by_id(level_id)
        if level is None:
            raise BattleSetupError(f"Level {level_id} not found.")
        enemy_def = self._catalog.get_enemy_by_id(level.enemy_ids[0])
        if enemy_def is None:
            raise BattleSetupError(f"Enemy '{level.enemy_ids[0]}' for level {level_id} not found.")

        cards: List[CardDef] = []
        for card_id in progress.equipped_cards:
            card = self._catalog.get_card_by_id(card_id)
            if card is None:
                logger.warning("Skipping unknown equipped card '%s'", card_id)
                continue
            cards.append(card)

        ctx = BattleContext(
            battle_id=make_battle_id(level.id, rng),
            level=level,
            player=create_player_combatant(progress),
            enemy=create_enemy_combatant(enemy_def),
            enemy_def=enemy_def,
            deck=DeckZones.from_cards(cards, rng),
            rng=rng,
            state=BattleState(),
            hand_size=self._config.hand_size,
            progress=progress,
        )
        logger.debug("Battle %s started: level %s vs %s", ctx.battle_id, level.id, enemy_def.id)

        events: List[BattleEvent] = [
            BattleStartedEvent(
                battle_id=ctx.battle_id, level_id=level.id, level_name=level.name, enemy_name=enemy_def.name
            )
        ]
        self._begin_player_turn(ctx, events)
        return ctx, events

    def get_battle_view(self, ctx: BattleContext) -> BattleView:
        """Return structured information for rendering."""
        player = ctx.player
        hand = [
            HandCardView(
                index=index,
                card_id=card.id,
                name=card.name,
                card_type=card.card_type,
                mana_cost=card.mana_cost,
                description=card.description,
                playable=self._rejection_for(ctx, card) is None,
            )
            for index, card in enumerate(ctx.deck.hand)
        ]
        return BattleView(
            battle_id=ctx.battle_id,
            level_name=ctx.level.name,
            turn=ctx.state.turn_count,
            phase=ctx.state.phase,
            player=self._combatant_view(ctx, "player"),
            mana=player.mana,
            max_mana=player.max_mana,
            enemy=self._combatant_view(ctx, "enemy"),
            enemy_attack=ctx.enemy.attack,
            enemy_intent=enemy_ai.preview_next_action(ctx),
            hand=hand,
            draw_pile_size=len(ctx.deck.draw_pile),
            discard_pile_size=len(ctx.deck.discard_pile),
            double_next_attack=ctx.double_next_attack,
        )

    # -----------------------
    # Player Actions
    # -----------------------
    def play_card(self, ctx: BattleContext, hand_index: int) -> List[BattleEvent]:
        rejected = self._reject_unless_acting(ctx)
        if rejected:
            return rejected
        if not 0 <= hand_index < len(ctx.deck.hand):
            return [ActionRejectedEvent(reason="invalid_index", detail=f"No card at position {hand_index}.")]
        card = ctx.deck.hand[hand_index]
        reason = self._rejection_for(ctx, card)
        if reason is not None:
            return [ActionRejectedEvent(reason=reason, detail=card.name)]

        events: List[BattleEvent] = []
        card_resolution.resolve_card(ctx, hand_index, self._catalog.all_cards(), events)
        if ctx.state.is_game_over:
            self._conclude(ctx, events)
            return events
        if not ctx.deck.hand or ctx.player.mana <= 0:
            self._end_player_turn(ctx, events)
        return events

    def discard_card(self, ctx: BattleContext, hand_index: int) -> List[BattleEvent]:
        rejected = self._reject_unless_acting(ctx)
        if rejected:
            return rejected
        if not 0 <= hand_index < len(ctx.deck.hand):
            return [ActionRejectedEvent(reason="invalid_index", detail=f"No card at position {hand_index}.")]
        card = ctx.deck.discard(hand_index)
        events: List[BattleEvent] = [CardDiscardedEvent(card_id=card.id, card_name=card.name)]
        if not ctx.deck.hand:
            self._end_player_turn(ctx, events)
        return events

    def end_player_turn(self, ctx: BattleContext) -> List[BattleEvent]:
        rejected = self._reject_unless_acting(ctx)
        if rejected:
            return rejected
        events: List[BattleEvent] = []
        self._end_player_turn(ctx, events)
        return events

    # -----------------------
    # Enemy Turn
    # -----------------------
    def resolve_enemy_turn(self, ctx: BattleContext) -> List[BattleEvent]:
        """Run the enemy turn and the following player turn start."""
        state = ctx.state
        if state.is_game_over:
            return [ActionRejectedEvent(reason="battle_over")]
        if state.phase != "enemy_turn_start":
            return [ActionRejectedEvent(reason="not_enemy_turn")]

        events: List[BattleEvent] = [TurnStartedEvent(side="enemy", turn=state.turn_count)]
        pipeline.tick_effects(ctx, "enemy", events)
        if state.is_game_over:
            self._conclude(ctx, events)
            return events

        stun = find_effect(ctx.effects, "stun", target="enemy", source="player")
        if stun is not None:
            pipeline.expire_effect(ctx, stun, events)
            events.append(StunnedEvent(side="enemy", name=ctx.enemy.name))
        else:
            state.phase = "enemy_acting"
            enemy_ai.take_turn(ctx, events)
            if state.is_game_over:
                self._conclude(ctx, events)
                return events

        state.phase = "enemy_turn_end"
        events.append(TurnEndedEvent(side="enemy"))
        self._begin_player_turn(ctx, events)
        return events

    # -----------------------
    # Internal Helpers
    # -----------------------
    def _begin_player_turn(self, ctx: BattleContext, events: List[BattleEvent]) -> None:
        state = ctx.state
        player = ctx.player
        state.phase = "player_turn_start"
        state.is_player_turn = True
        state.turn_count += 1
        player.mana = player.max_mana
        events.append(TurnStartedEvent(side="player", turn=state.turn_count))
        events.append(ManaChangedEvent(mana=player.mana, max_mana=player.max_mana))

        pipeline.tick_effects(ctx, "player", events)
        if state.is_game_over:
            self._conclude(ctx, events)
            return
        pipeline.draw_cards(ctx, None, events)

        stuns = effects_of(ctx.effects, "stun", target="player", source="enemy")
        for stun in stuns:
            pipeline.expire_effect(ctx, stun, events)
        if stuns:
            if ctx.last_stunned_turn != state.turn_count - 1:
                ctx.last_stunned_turn = state.turn_count
                events.append(StunnedEvent(side="player", name=player.name))
                self._end_player_turn(ctx, events)
                return
            logger.debug("Player shrugs off a stun right after losing turn %s", ctx.last_stunned_turn)
        state.phase = "player_acting"

    def _end_player_turn(self, ctx: BattleContext, events: List[BattleEvent]) -> None:
        state = ctx.state
        state.phase = "player_turn_end"
        events.append(TurnEndedEvent(side="player"))
        state.is_player_turn = False
        state.phase = "enemy_turn_start"

    def _conclude(self, ctx: BattleContext, events: List[BattleEvent]) -> None:
        state = ctx.state
        state.phase = "battle_over"
        state.is_player_turn = False
        progress = ctx.progress
        saved = False
        if progress is not None:
            events.extend(self._progression.finish_battle(ctx, progress))
            if state.is_victory and self._progress_store is not None:
                saved = self._progress_store.save_progress(progress)
        logger.info("Battle %s ended (victory=%s) after %s turns", ctx.battle_id, state.is_victory, state.turn_count)
        events.append(BattleEndedEvent(victory=state.is_victory, turn_count=state.turn_count, progress_saved=saved))

    def _reject_unless_acting(self, ctx: BattleContext) -> List[BattleEvent]:
        if ctx.state.is_game_over:
            return [ActionRejectedEvent(reason="battle_over")]
        if ctx.state.phase != "player_acting":
            return [ActionRejectedEvent(reason="not_player_turn")]
        return []

    @staticmethod
    def _rejection_for(ctx: BattleContext, card: CardDef) -> RejectionReason | None:
        if ctx.player.mana < card.mana_cost:
            return "insufficient_mana"
        if card.card_type == "attack" and find_effect(ctx.effects, "disarm", target="player", source="enemy"):
            return "disarmed"
        return None

    @staticmethod
    def _combatant_view(ctx: BattleContext, side: Side) -> CombatantView:
        combatant = ctx.combatant(side)
        return CombatantView(
            name=combatant.name,
            health=combatant.health,
            max_health=combatant.max_health,
            effects=[describe_effect(effect) for effect in ctx.effects if effect.target == side],
        )
