from pathlib import Path

from cardbattle.core.config import EngineConfig
from cardbattle.domain.defs import AchievementDef
from cardbattle.domain.progression import (
    PlayerProgress,
    achievement_met,
    add_experience,
    equip_card,
    exp_needed,
    unequip_card,
    unequipped_cards,
    unlock_level,
)
from cardbattle.services.battle_events import (
    AchievementUnlockedEvent,
    CardRewardedEvent,
    LevelUnlockedEvent,
    LevelUpEvent,
)
from cardbattle.services.progression_service import ProgressionService
from tests.helpers.battle_builders import make_catalog, make_ctx


def test_new_game_uses_config_and_starter_deck() -> None:
    progress = PlayerProgress.new_game(["strike", "strike"], EngineConfig(starting_health=80))

    assert progress.owned_cards == ["strike", "strike"]
    assert progress.equipped_cards == ["strike", "strike"]
    assert progress.max_health == 80
    assert progress.unlocked_levels == [1]


def test_single_level_up() -> None:
    progress = PlayerProgress(experience=95)
    reached = add_experience(progress, 10)

    assert reached == [2]
    assert progress.level == 2
    assert progress.experience == 5
    assert progress.max_health == 110
    assert progress.max_mana == 4


def test_level_ups_cascade() -> None:
    progress = PlayerProgress()
    reached = add_experience(progress, 350)

    assert exp_needed(1) == 100 and exp_needed(2) == 200
    assert reached == [2, 3]
    assert progress.level == 3
    assert progress.experience == 50


def test_unlock_level_is_idempotent_and_sorted() -> None:
    progress = PlayerProgress(unlocked_levels=[1, 3])
    assert unlock_level(progress, 2)
    assert not unlock_level(progress, 2)
    assert progress.unlocked_levels == [1, 2, 3]


def test_equip_only_spare_owned_copies() -> None:
    progress = PlayerProgress(owned_cards=["strike", "strike", "defend"], equipped_cards=["strike"])

    assert unequipped_cards(progress) == ["strike", "defend"]
    assert equip_card(progress, "strike")
    assert not equip_card(progress, "strike")
    assert not equip_card(progress, "fireball")
    assert unequip_card(progress, "strike")
    assert progress.equipped_cards == ["strike"]


def test_achievement_conditions() -> None:
    progress = PlayerProgress(defeated_enemies=["dragon"], unlocked_levels=[1, 2, 3, 4])
    progress.stats.total_damage_dealt = 120

    slayer = AchievementDef("slayer", "Slayer", "", "defeat_enemy", "dragon")
    damage = AchievementDef("damage", "Damage", "", "total_damage", 100)
    conqueror = AchievementDef("conqueror", "Conqueror", "", "all_levels_unlocked", 0)
    healer = AchievementDef("healer", "Healer", "", "total_healing", 1)

    assert achievement_met(slayer, progress, 4)
    assert achievement_met(damage, progress, 4)
    assert achievement_met(conqueror, progress, 4)
    assert not achievement_met(conqueror, progress, 5)
    assert not achievement_met(healer, progress, 4)


def test_finish_battle_victory_applies_rewards(tmp_path: Path) -> None:
    catalog = make_catalog(tmp_path)
    service = ProgressionService(catalog)
    ctx = make_ctx()
    ctx.level = catalog.get_level_by_id(1)
    ctx.stats.damage_dealt = 20
    ctx.stats.gold_earned = 10
    ctx.state.is_game_over = True
    ctx.state.is_victory = True
    progress = PlayerProgress(owned_cards=["strike"], experience=90)

    events = service.finish_battle(ctx, progress)

    assert progress.gold == 10 + 50 + 5
    assert progress.level == 2
    assert progress.unlocked_levels == [1, 2]
    assert progress.owned_cards == ["strike", "poison_blade"]
    assert progress.defeated_enemies == ["dummy"]
    assert progress.stats.total_battles_won == 1
    assert progress.stats.total_damage_dealt == 20
    assert progress.achievements == ["first_victory"]
    assert any(isinstance(evt, LevelUpEvent) for evt in events)
    assert any(isinstance(evt, LevelUnlockedEvent) and evt.level_id == 2 for evt in events)
    assert any(isinstance(evt, CardRewardedEvent) for evt in events)
    assert any(isinstance(evt, AchievementUnlockedEvent) for evt in events)


def test_finish_battle_defeat_only_records_statistics(tmp_path: Path) -> None:
    service = ProgressionService(make_catalog(tmp_path))
    ctx = make_ctx()
    ctx.stats.cards_played = 4
    ctx.state.is_game_over = True
    progress = PlayerProgress()

    assert service.finish_battle(ctx, progress) == []
    assert progress.stats.total_cards_played == 4
    assert progress.stats.total_battles_won == 0
    assert progress.unlocked_levels == [1]


def test_last_level_does_not_unlock_beyond_catalog(tmp_path: Path) -> None:
    catalog = make_catalog(tmp_path)
    service = ProgressionService(catalog)
    progress = PlayerProgress(unlocked_levels=[1, 2])

    events = service.apply_victory_rewards(catalog.get_level_by_id(2), progress)

    assert progress.unlocked_levels == [1, 2]
    assert not any(isinstance(evt, LevelUnlockedEvent) for evt in events)


def test_achievements_unlock_once(tmp_path: Path) -> None:
    service = ProgressionService(make_catalog(tmp_path))
    progress = PlayerProgress()
    progress.stats.total_battles_won = 1

    assert len(service.check_achievements(progress)) == 2
    assert service.check_achievements(progress) == []
