from __future__ import annotations

from pathlib import Path

from cardbattle.core.rng import RNG
from cardbattle.domain.progression import PlayerProgress
from cardbattle.presentation.cli.render import format_battle_view, format_event, format_events
from cardbattle.services.battle_events import (
    ActionRejectedEvent,
    BattleEndedEvent,
    CardDiscardedEvent,
    DamageDealtEvent,
    EffectTickedEvent,
    TurnEndedEvent,
)
from cardbattle.services.battle_service import BattleService
from tests.helpers.battle_builders import make_catalog


def test_damage_line_mentions_absorbed_amount() -> None:
    line = format_event(
        DamageDealtEvent(source="enemy", target="player", amount=2, absorbed=3, target_health=48)
    )
    assert line is not None
    assert "3 absorbed" in line
    assert "48" in line


def test_rejections_are_human_readable() -> None:
    assert format_event(ActionRejectedEvent(reason="insufficient_mana")) == "Not enough mana."


def test_quiet_events_are_hidden_without_debug(monkeypatch) -> None:
    monkeypatch.delenv("CARDBATTLE_DEBUG", raising=False)
    tick = EffectTickedEvent(effect_id="fx1", effect_type="poison", target="enemy", amount=2, remaining_duration=1)

    assert format_events([TurnEndedEvent(side="player"), tick]) == []

    monkeypatch.setenv("CARDBATTLE_DEBUG", "1")
    assert format_events([tick]) == ["[fx1] poison ticks for 2, 1 left."]


def test_forced_discard_and_battle_end_lines() -> None:
    assert format_event(CardDiscardedEvent(card_id="strike", card_name="Strike", forced=True)) == (
        "You are forced to discard Strike."
    )
    assert format_event(BattleEndedEvent(victory=True, turn_count=3, progress_saved=True)) == (
        "Victory! The battle lasted 3 turn(s). Progress saved."
    )


def test_battle_view_lists_hand_and_intent(tmp_path: Path) -> None:
    service = BattleService(make_catalog(tmp_path))
    progress = PlayerProgress(owned_cards=["strike"] * 5, equipped_cards=["strike"] * 5)
    ctx, _ = service.start_battle(1, progress, RNG(1))

    lines = format_battle_view(service.get_battle_view(ctx))

    assert lines[0] == "Yard - Turn 1"
    assert "Intent: Attack for 5" in lines[2]
    assert sum(1 for line in lines if "Strike [attack, 1 mana]" in line) == 5
