from __future__ import annotations

from pathlib import Path

import pytest

from cardbattle.core.rng import RNG
from cardbattle.domain.progression import PlayerProgress
from cardbattle.services import combat_pipeline as pipeline
from cardbattle.services.battle_events import StunnedEvent, TurnStartedEvent
from cardbattle.services.battle_service import BattleService
from cardbattle.services.controllers import BattleAction, BattleController
from tests.helpers.battle_builders import make_catalog


def _make_controller(tmp_path: Path) -> tuple[BattleService, BattleController]:
    service = BattleService(make_catalog(tmp_path))
    return service, BattleController(service)


def _progress() -> PlayerProgress:
    return PlayerProgress(owned_cards=["strike"] * 6, equipped_cards=["strike"] * 6)


def test_end_turn_runs_the_enemy_turn(tmp_path: Path) -> None:
    service, controller = _make_controller(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(1))

    events = controller.apply_player_action(ctx, BattleAction(action_type="end_turn"))

    assert controller.is_player_turn(ctx)
    assert ctx.state.turn_count == 2
    assert [evt.side for evt in events if isinstance(evt, TurnStartedEvent)] == ["enemy", "player"]


def test_play_action_requires_hand_index(tmp_path: Path) -> None:
    service, controller = _make_controller(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(2))

    with pytest.raises(ValueError):
        controller.apply_player_action(ctx, BattleAction(action_type="play"))


def test_play_action_damages_enemy(tmp_path: Path) -> None:
    service, controller = _make_controller(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(3))

    controller.apply_player_action(ctx, BattleAction(action_type="play", hand_index=0))

    assert ctx.enemy.health == 14
    assert controller.get_battle_view(ctx).mana == 2


def test_enemy_turns_repeat_while_player_is_stunned(tmp_path: Path) -> None:
    service, controller = _make_controller(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(4))
    pipeline.grant_effect(ctx, "stun", 0, 2, source="enemy", target="player", events=[])

    controller.apply_player_action(ctx, BattleAction(action_type="end_turn"))

    assert controller.is_player_turn(ctx)
    assert ctx.state.turn_count == 3
    assert ctx.player.health == 90


def test_battle_over_stops_enemy_loop(tmp_path: Path) -> None:
    service, controller = _make_controller(tmp_path)
    ctx, _ = service.start_battle(1, _progress(), RNG(5))
    ctx.player.health = 1

    controller.apply_player_action(ctx, BattleAction(action_type="end_turn"))

    assert controller.is_battle_over(ctx)
    assert not controller.is_enemy_turn(ctx)
    assert ctx.outcome() == "defeat"


def test_enemy_that_only_stuns_cannot_lock_the_player_out(tmp_path: Path) -> None:
    catalog = make_catalog(
        tmp_path,
        enemies={
            "dummy": {
                "name": "Hypnotist",
                "health": 20,
                "attack": 5,
                "patterns": [{"type": "debuff", "name": "Daze", "debuff": "stun"}],
            }
        },
    )
    service = BattleService(catalog)
    controller = BattleController(service)
    ctx, _ = service.start_battle(1, _progress(), RNG(6))

    events = controller.apply_player_action(ctx, BattleAction(action_type="end_turn"))

    assert controller.is_player_turn(ctx)
    assert ctx.state.turn_count == 3
    assert [evt.side for evt in events if isinstance(evt, StunnedEvent)] == ["player"]
    assert ctx.player.health == 100

    events = controller.apply_player_action(ctx, BattleAction(action_type="end_turn"))

    assert controller.is_player_turn(ctx)
    assert ctx.state.turn_count == 5
    assert [evt.side for evt in events if isinstance(evt, StunnedEvent)] == ["player"]
