"""Folds finished battles into persistent player progress."""
from __future__ import annotations

import logging
from typing import List

from cardbattle.core.config import EngineConfig
from cardbattle.domain.battle_models import BattleContext
from cardbattle.domain.defs import LevelDef
from cardbattle.domain.progression import (
    PlayerProgress,
    achievement_met,
    add_experience,
    unlock_level,
)
from cardbattle.services.battle_events import (
    AchievementUnlockedEvent,
    BattleEvent,
    CardRewardedEvent,
    ExpGainedEvent,
    GoldGainedEvent,
    LevelUnlockedEvent,
    LevelUpEvent,
)
from cardbattle.services.catalog import Catalog

logger = logging.getLogger(__name__)


class ProgressionService:
    """Applies rewards, statistics and achievements after a battle."""

    def __init__(self, catalog: Catalog, config: EngineConfig | None = None) -> None:
        self._catalog = catalog
        self._config = config or EngineConfig()

    def record_battle(self, ctx: BattleContext, progress: PlayerProgress) -> None:
        """Fold the per-battle statistics into progress, win or lose."""
        stats = progress.stats
        stats.total_damage_dealt += ctx.stats.damage_dealt
        stats.total_healing += ctx.stats.healing
        stats.total_gold_earned += ctx.stats.gold_earned
        stats.total_cards_played += ctx.stats.cards_played
        progress.gold += ctx.stats.gold_earned

    def apply_victory_rewards(self, level: LevelDef, progress: PlayerProgress) -> List[BattleEvent]:
        """Grant gold, experience, the next level and reward cards."""
        events: List[BattleEvent] = []
        rewards = level.rewards

        if rewards.gold:
            self._gain_gold(progress, rewards.gold, events)

        if rewards.experience:
            reached = add_experience(progress, rewards.experience, self._config)
            events.append(ExpGainedEvent(amount=rewards.experience, total_exp=progress.experience))
            for new_level in reached:
                logger.info("Player reached level %s", new_level)
                events.append(
                    LevelUpEvent(new_level=new_level, max_health=progress.max_health, max_mana=progress.max_mana)
                )

        next_level_id = level.id + 1
        if level.id < self._catalog.get_levels_count() and unlock_level(progress, next_level_id):
            events.append(LevelUnlockedEvent(level_id=next_level_id))

        for card_id in rewards.card_ids:
            card = self._catalog.get_card_by_id(card_id)
            if card is None:
                logger.warning("Level %s rewards unknown card '%s'", level.id, card_id)
                continue
            progress.owned_cards.append(card_id)
            events.append(CardRewardedEvent(card_id=card_id, card_name=card.name))

        progress.stats.total_battles_won += 1
        return events

    def check_achievements(self, progress: PlayerProgress) -> List[BattleEvent]:
        """Unlock every achievement newly satisfied by ``progress``."""
        events: List[BattleEvent] = []
        levels_count = self._catalog.get_levels_count()
        for achievement in self._catalog.all_achievements():
            if achievement.id in progress.achievements:
                continue
            if not achievement_met(achievement, progress, levels_count):
                continue
            progress.achievements.append(achievement.id)
            events.append(
                AchievementUnlockedEvent(
                    achievement_id=achievement.id, name=achievement.name, reward_gold=achievement.reward_gold
                )
            )
            if achievement.reward_gold:
                self._gain_gold(progress, achievement.reward_gold, events)
        return events

    def finish_battle(self, ctx: BattleContext, progress: PlayerProgress) -> List[BattleEvent]:
        """Record statistics and, on victory, rewards and achievements."""
        self.record_battle(ctx, progress)
        if not ctx.state.is_victory:
            return []
        if ctx.enemy.enemy_id not in progress.defeated_enemies:
            progress.defeated_enemies.append(ctx.enemy.enemy_id)
        events = self.apply_victory_rewards(ctx.level, progress)
        events.extend(self.check_achievements(progress))
        return events

    @staticmethod
    def _gain_gold(progress: PlayerProgress, amount: int, events: List[BattleEvent]) -> None:
        progress.gold += amount
        progress.stats.total_gold_earned += amount
        events.append(GoldGainedEvent(amount=amount, total_gold=progress.gold))
