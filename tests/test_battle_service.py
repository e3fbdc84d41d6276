from __future__ import annotations

from pathlib import Path

import pytest

from cardbattle.core.rng import RNG
from cardbattle.data.save_store import SaveSlotStore
from cardbattle.domain.progression import PlayerProgress
from cardbattle.services import combat_pipeline as pipeline
from cardbattle.services.battle_events import (
    ActionRejectedEvent,
    BattleEndedEvent,
    BattleStartedEvent,
    CardDrawnEvent,
    StunnedEvent,
    TurnEndedEvent,
    TurnStartedEvent,
)
from cardbattle.services.battle_service import BattleService
from cardbattle.services.errors import BattleSetupError
from cardbattle.services.save_service import SaveService
from tests.helpers.battle_builders import make_catalog


def _make_service(tmp_path: Path, *, enemy_health: int = 20, enemy_attack: int = 5) -> tuple[BattleService, SaveService]:
    catalog = make_catalog(
        tmp_path / "defs",
        enemies={"dummy": {"name": "Training Dummy", "health": enemy_health, "attack": enemy_attack}},
    )
    save_service = SaveService(SaveSlotStore(tmp_path / "saves"), slot=1)
    return BattleService(catalog, progress_store=save_service), save_service


def _progress(card_id: str = "strike", copies: int = 5) -> PlayerProgress:
    cards = [card_id] * copies
    return PlayerProgress(owned_cards=list(cards), equipped_cards=list(cards))


def _only_rejection(events) -> str:
    assert len(events) == 1
    assert isinstance(events[0], ActionRejectedEvent)
    return events[0].reason


def test_start_battle_draws_opening_hand(tmp_path: Path) -> None:
    service, _ = _make_service(tmp_path)
    ctx, events = service.start_battle(1, _progress(), RNG(1))

    assert isinstance(events[0], BattleStartedEvent)
    assert isinstance(events[1], TurnStartedEvent)
    assert len([evt for evt in events if isinstance(evt, CardDrawnEvent)]) == 5
    assert ctx.state.phase == "player_acting"
    assert ctx.state.turn_count == 1
    assert ctx.player.mana == 3
    assert len(ctx.deck.hand) == 5


def test_start_battle_unknown_level_raises(tmp_path: Path) -> None:
    service, _ = _make_service(tmp_path)
    with pytest.raises(BattleSetupError):
        service.start_battle(99, _progress(), RNG(1))


def test_play_strike_end_to_end(tmp_path: Path) -> None:
    service, _ = _make_service(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(2))

    service.play_card(ctx, 0)

    assert ctx.enemy.health == 14
    assert ctx.player.mana == 2
    assert len(ctx.deck.discard_pile) == 1
    assert ctx.deck.discard_pile[0].id == "strike"
    assert len(ctx.deck.hand) == 4


def test_rejected_actions_leave_state_untouched(tmp_path: Path) -> None:
    service, _ = _make_service(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(3))

    assert _only_rejection(service.play_card(ctx, 9)) == "invalid_index"
    assert _only_rejection(service.resolve_enemy_turn(ctx)) == "not_enemy_turn"

    ctx.player.mana = 0
    assert _only_rejection(service.play_card(ctx, 0)) == "insufficient_mana"
    assert len(ctx.deck.hand) == 5
    assert ctx.enemy.health == 20


def test_disarm_blocks_attack_cards(tmp_path: Path) -> None:
    service, _ = _make_service(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(4))
    pipeline.grant_effect(ctx, "disarm", 0, 1, source="enemy", target="player", events=[])

    assert _only_rejection(service.play_card(ctx, 0)) == "disarmed"
    assert not service.get_battle_view(ctx).hand[0].playable


def test_turn_ends_automatically_when_mana_runs_out(tmp_path: Path) -> None:
    service, _ = _make_service(tmp_path, enemy_health=100)
    ctx, _ = service.start_battle(1, _progress(), RNG(5))

    service.play_card(ctx, 0)
    service.play_card(ctx, 0)
    events = service.play_card(ctx, 0)

    assert isinstance(events[-1], TurnEndedEvent)
    assert ctx.state.phase == "enemy_turn_start"
    assert _only_rejection(service.play_card(ctx, 0)) == "not_player_turn"


def test_discarding_the_last_card_ends_the_turn(tmp_path: Path) -> None:
    service, _ = _make_service(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(6))

    for _ in range(5):
        service.discard_card(ctx, 0)

    assert not ctx.deck.hand
    assert ctx.state.phase == "enemy_turn_start"


def test_enemy_turn_then_next_player_turn(tmp_path: Path) -> None:
    service, _ = _make_service(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(7))
    service.play_card(ctx, 0)
    service.end_player_turn(ctx)

    events = service.resolve_enemy_turn(ctx)

    assert ctx.player.health == 95
    assert ctx.state.turn_count == 2
    assert ctx.state.phase == "player_acting"
    assert ctx.player.mana == 3
    assert len(ctx.deck.hand) == 5
    sides = [evt.side for evt in events if isinstance(evt, TurnStartedEvent)]
    assert sides == ["enemy", "player"]


def test_poison_tick_wins_the_battle_and_saves(tmp_path: Path) -> None:
    service, save_service = _make_service(tmp_path, enemy_health=6)
    progress = _progress("poison_blade")
    ctx, _ = service.start_battle(1, progress, RNG(8))

    service.play_card(ctx, 0)
    assert ctx.enemy.health == 2
    service.end_player_turn(ctx)
    events = service.resolve_enemy_turn(ctx)

    ended = events[-1]
    assert isinstance(ended, BattleEndedEvent)
    assert ended.victory and ended.progress_saved
    assert ended.turn_count == 2
    assert ctx.state.is_game_over and ctx.state.is_victory
    assert progress.unlocked_levels == [1, 2]
    assert progress.gold == 55
    assert _only_rejection(service.resolve_enemy_turn(ctx)) == "battle_over"
    assert _only_rejection(service.play_card(ctx, 0)) == "battle_over"

    loaded = save_service.load_progress()
    assert loaded is not None
    assert loaded.unlocked_levels == [1, 2]
    assert loaded.stats.total_battles_won == 1


def test_defeat_records_but_does_not_save(tmp_path: Path) -> None:
    service, save_service = _make_service(tmp_path, enemy_attack=500)
    progress = _progress()
    ctx, _ = service.start_battle(1, progress, RNG(9))
    service.play_card(ctx, 0)
    service.end_player_turn(ctx)

    events = service.resolve_enemy_turn(ctx)

    ended = events[-1]
    assert isinstance(ended, BattleEndedEvent)
    assert not ended.victory and not ended.progress_saved
    assert progress.stats.total_cards_played == 1
    assert progress.stats.total_battles_won == 0
    assert save_service.load_progress() is None


def test_stunned_enemy_skips_its_action(tmp_path: Path) -> None:
    service, _ = _make_service(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(10))
    pipeline.grant_effect(ctx, "stun", 0, 1, source="player", target="enemy", events=[])
    service.end_player_turn(ctx)

    events = service.resolve_enemy_turn(ctx)

    assert any(isinstance(evt, StunnedEvent) and evt.side == "enemy" for evt in events)
    assert ctx.player.health == 100
    assert ctx.effects == []
    assert ctx.state.phase == "player_acting"


def test_stunned_player_hands_the_turn_back(tmp_path: Path) -> None:
    service, _ = _make_service(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(11))
    # the enemy tick at its own turn start spends one turn of duration
    pipeline.grant_effect(ctx, "stun", 0, 2, source="enemy", target="player", events=[])
    service.end_player_turn(ctx)

    events = service.resolve_enemy_turn(ctx)

    assert any(isinstance(evt, StunnedEvent) and evt.side == "player" for evt in events)
    assert ctx.state.phase == "enemy_turn_start"
    assert ctx.state.turn_count == 2
    service.resolve_enemy_turn(ctx)
    assert ctx.state.phase == "player_acting"
    assert ctx.player.health == 90


def test_battle_view_describes_state(tmp_path: Path) -> None:
    service, _ = _make_service(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(12))
    pipeline.grant_effect(ctx, "poison", 2, 3, source="player", target="enemy", events=[])

    view = service.get_battle_view(ctx)

    assert view.turn == 1
    assert view.enemy.health == 20
    assert view.enemy_intent == "Attack for 5"
    assert view.enemy.effects and "Poison" in view.enemy.effects[0]
    assert [card.index for card in view.hand] == [0, 1, 2, 3, 4]
    assert all(card.playable for card in view.hand)
    assert view.draw_pile_size == 0


def test_battles_with_the_same_seed_keep_their_own_progress(tmp_path: Path) -> None:
    service, _ = _make_service(tmp_path, enemy_health=6)
    first = _progress("poison_blade")
    second = _progress("poison_blade")
    first_ctx, _ = service.start_battle(1, first, RNG(5))
    second_ctx, _ = service.start_battle(1, second, RNG(5))
    assert first_ctx.battle_id == second_ctx.battle_id

    service.play_card(first_ctx, 0)
    service.end_player_turn(first_ctx)
    service.resolve_enemy_turn(first_ctx)

    assert first_ctx.state.is_victory
    assert first.gold == 55
    assert first.stats.total_battles_won == 1
    assert second.gold == 0
    assert second.stats.total_battles_won == 0
    assert second_ctx.progress is second
