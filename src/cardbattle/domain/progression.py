"""Persistent player progress and the experience curve."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from cardbattle.core.config import EngineConfig
from cardbattle.domain.defs import AchievementDef


@dataclass(slots=True)
class ProgressStatistics:
    """Lifetime totals across every battle."""

    total_damage_dealt: int = 0
    total_healing: int = 0
    total_gold_earned: int = 0
    total_battles_won: int = 0
    total_cards_played: int = 0


@dataclass(slots=True)
class PlayerProgress:
    """Everything that survives between battles."""

    unlocked_levels: List[int] = field(default_factory=lambda: [1])
    owned_cards: List[str] = field(default_factory=list)
    equipped_cards: List[str] = field(default_factory=list)
    achievements: List[str] = field(default_factory=list)
    defeated_enemies: List[str] = field(default_factory=list)
    stats: ProgressStatistics = field(default_factory=ProgressStatistics)
    level: int = 1
    experience: int = 0
    gold: int = 0
    max_health: int = 100
    max_mana: int = 3

    @classmethod
    def new_game(cls, starter_deck: Sequence[str], config: EngineConfig | None = None) -> "PlayerProgress":
        config = config or EngineConfig()
        return cls(
            owned_cards=list(starter_deck),
            equipped_cards=list(starter_deck),
            max_health=config.starting_health,
            max_mana=config.starting_mana,
        )


def exp_needed(level: int, config: EngineConfig | None = None) -> int:
    """Experience required to leave ``level``."""
    per_level = (config or EngineConfig()).exp_per_level
    return level * per_level


def add_experience(progress: PlayerProgress, amount: int, config: EngineConfig | None = None) -> List[int]:
    """Add experience and apply every level-up it pays for.

    Returns the levels reached, in order. Empty when no threshold was crossed.
    """
    config = config or EngineConfig()
    progress.experience += max(0, amount)
    reached: List[int] = []
    while progress.experience >= exp_needed(progress.level, config):
        progress.experience -= exp_needed(progress.level, config)
        progress.level += 1
        progress.max_health += config.level_up_health
        progress.max_mana += config.level_up_mana
        reached.append(progress.level)
    return reached


def unlock_level(progress: PlayerProgress, level_id: int) -> bool:
    if level_id in progress.unlocked_levels:
        return False
    progress.unlocked_levels.append(level_id)
    progress.unlocked_levels.sort()
    return True


def equip_card(progress: PlayerProgress, card_id: str) -> bool:
    """Equip one owned copy of ``card_id`` if a spare copy exists."""
    if progress.owned_cards.count(card_id) <= progress.equipped_cards.count(card_id):
        return False
    progress.equipped_cards.append(card_id)
    return True


def unequip_card(progress: PlayerProgress, card_id: str) -> bool:
    if card_id not in progress.equipped_cards:
        return False
    progress.equipped_cards.remove(card_id)
    return True


def unequipped_cards(progress: PlayerProgress) -> List[str]:
    """Owned copies not currently in the deck, in ownership order."""
    remaining = list(progress.equipped_cards)
    spare: List[str] = []
    for card_id in progress.owned_cards:
        if card_id in remaining:
            remaining.remove(card_id)
        else:
            spare.append(card_id)
    return spare


def achievement_met(achievement: AchievementDef, progress: PlayerProgress, levels_count: int) -> bool:
    """Return True when ``progress`` satisfies the achievement condition."""
    stats = progress.stats
    kind = achievement.condition
    target = achievement.value
    if kind == "defeat_enemy":
        return str(target) in progress.defeated_enemies
    if kind == "all_levels_unlocked":
        return len(progress.unlocked_levels) >= levels_count
    threshold = int(target)
    if kind == "battles_won":
        return stats.total_battles_won >= threshold
    if kind == "cards_collected":
        return len(set(progress.owned_cards)) >= threshold
    if kind == "total_damage":
        return stats.total_damage_dealt >= threshold
    if kind == "total_healing":
        return stats.total_healing >= threshold
    if kind == "total_gold":
        return stats.total_gold_earned >= threshold
    if kind == "cards_played":
        return stats.total_cards_played >= threshold
    if kind == "player_level":
        return progress.level >= threshold
    return False
