import json
from pathlib import Path

import pytest

from cardbattle.data.errors import DataLoadError, DataReferenceError, DataValidationError
from cardbattle.data.repositories import (
    AchievementsRepository,
    CardsRepository,
    EnemiesRepository,
    LevelsRepository,
)
from cardbattle.domain.defs import AttackAction, SpecialAction
from cardbattle.services.catalog import Catalog
from tests.helpers.battle_builders import write_definitions


def _write(tmp_path: Path, filename: str, payload: object) -> Path:
    (tmp_path / filename).write_text(json.dumps(payload), encoding="utf-8")
    return tmp_path


def test_cards_repository_loads_starter_cards() -> None:
    repo = CardsRepository()
    strike = repo.get("strike")

    assert strike.card_type == "attack"
    assert strike.mana_cost == 1
    assert strike.value == 6
    assert repo.find("no_such_card") is None


def test_enemies_repository_builds_action_variants() -> None:
    repo = EnemiesRepository()
    golem = repo.get("rock_golem")

    assert golem.health == 50
    assert not golem.actions
    assert isinstance(golem.patterns[0], AttackAction)
    assert any(isinstance(action, SpecialAction) and action.special == "summon" for action in golem.patterns)


def test_levels_repository_orders_levels_numerically() -> None:
    levels = LevelsRepository().all()
    assert [level.id for level in levels] == sorted(level.id for level in levels)
    assert levels[0].enemy_ids == ("goblin",)


def test_missing_file_raises_data_load_error(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        CardsRepository(tmp_path).all()


def test_top_level_must_be_an_object(tmp_path: Path) -> None:
    _write(tmp_path, "cards.json", ["strike"])
    with pytest.raises(DataValidationError):
        CardsRepository(tmp_path).all()


def test_skill_card_without_effect_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path, "cards.json", {"focus": {"name": "Focus", "type": "skill", "mana_cost": 1, "value": 2}})
    with pytest.raises(DataValidationError):
        CardsRepository(tmp_path).all()


def test_card_effect_must_match_card_type(tmp_path: Path) -> None:
    _write(
        tmp_path,
        "cards.json",
        {"odd": {"name": "Odd", "type": "attack", "mana_cost": 1, "value": 2, "effect": "heal"}},
    )
    with pytest.raises(DataValidationError):
        CardsRepository(tmp_path).all()


def test_negative_mana_cost_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path, "cards.json", {"free": {"name": "Free", "type": "attack", "mana_cost": -1, "value": 2}})
    with pytest.raises(DataValidationError):
        CardsRepository(tmp_path).all()


def test_random_condition_must_be_a_probability(tmp_path: Path) -> None:
    _write(
        tmp_path,
        "enemies.json",
        {
            "imp": {
                "name": "Imp",
                "health": 10,
                "attack": 2,
                "actions": [{"type": "attack", "name": "Claw", "condition": {"type": "random", "value": 3}}],
            }
        },
    )
    with pytest.raises(DataValidationError):
        EnemiesRepository(tmp_path).all()


def test_level_ids_must_be_integers(tmp_path: Path) -> None:
    _write(tmp_path, "levels.json", {"one": {"name": "One", "enemies": ["goblin"], "rewards": {}}})
    with pytest.raises(DataValidationError):
        LevelsRepository(tmp_path).all()


def test_defeat_enemy_achievement_keeps_string_value() -> None:
    slayer = AchievementsRepository().get("dragon_slayer")
    assert slayer.condition == "defeat_enemy"
    assert slayer.value == "dragon"


def test_validate_references_flags_unknown_enemy(tmp_path: Path) -> None:
    base = write_definitions(
        tmp_path,
        levels={"1": {"name": "Void", "enemies": ["ghost"], "rewards": {"gold": 1}}},
    )
    with pytest.raises(DataReferenceError):
        Catalog.from_definitions(base).validate_references()
