"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Iterable, List, Sequence

from cardbattle.services.battle_events import (
    AchievementUnlockedEvent,
    ActionRejectedEvent,
    BattleEndedEvent,
    BattleEvent,
    BattleStartedEvent,
    CardDiscardedEvent,
    CardDrawnEvent,
    CardPlayedEvent,
    CardRewardedEvent,
    DamageDealtEvent,
    EffectAppliedEvent,
    EffectExpiredEvent,
    EffectTickedEvent,
    EnemyActionEvent,
    ExpGainedEvent,
    GoldGainedEvent,
    HandTransformedEvent,
    HealedEvent,
    LevelUnlockedEvent,
    LevelUpEvent,
    ManaChangedEvent,
    NextAttackEmpoweredEvent,
    PileRecycledEvent,
    StatChangedEvent,
    StunnedEvent,
    TurnEndedEvent,
    TurnStartedEvent,
)
from cardbattle.services.battle_service import BattleView

_REJECTION_TEXT = {
    "invalid_index": "There is no card in that position.",
    "insufficient_mana": "Not enough mana.",
    "disarmed": "You are disarmed and cannot play attack cards.",
    "not_player_turn": "It is not your turn.",
    "not_enemy_turn": "It is not the enemy's turn.",
    "battle_over": "The battle is already over.",
}


def debug_enabled() -> bool:
    """Return True only when CARDBATTLE_DEBUG is explicitly set to '1'."""
    return os.getenv("CARDBATTLE_DEBUG") == "1"


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")


def _side_name(side: str | None) -> str:
    if side == "player":
        return "You"
    if side == "enemy":
        return "The enemy"
    return "Something"


def format_event(event: BattleEvent) -> str | None:
    """Return a one-line description of ``event``, or None when it is not worth showing."""
    if isinstance(event, BattleStartedEvent):
        return f"Level {event.level_id}: {event.level_name}. {event.enemy_name} appears!"
    if isinstance(event, TurnStartedEvent):
        owner = "Your" if event.side == "player" else "Enemy"
        return f"{owner} turn {event.turn} begins."
    if isinstance(event, TurnEndedEvent):
        return None
    if isinstance(event, StunnedEvent):
        return f"{event.name} is stunned and loses the turn."
    if isinstance(event, CardDrawnEvent):
        return f"Drew {event.card_name}."
    if isinstance(event, PileRecycledEvent):
        return f"Shuffled {event.card_count} card(s) from the discard pile into the draw pile."
    if isinstance(event, CardPlayedEvent):
        return f"You play {event.card_name} ({event.mana_cost} mana)."
    if isinstance(event, CardDiscardedEvent):
        if event.forced:
            return f"You are forced to discard {event.card_name}."
        return f"You discard {event.card_name}."
    if isinstance(event, HandTransformedEvent):
        return f"Your hand transforms into {len(event.new_card_ids)} new card(s)."
    if isinstance(event, DamageDealtEvent):
        target = "you" if event.target == "player" else "the enemy"
        if event.kind == "execute":
            return f"The enemy executes you for {event.amount} damage!"
        if event.kind == "effect":
            text = f"An effect deals {event.amount} damage to {target}"
        elif event.kind in ("thorns", "reflect"):
            text = f"{event.kind.title()} deal {event.amount} damage to {target}"
        else:
            text = f"{_side_name(event.source)} deal(s) {event.amount} damage to {target}"
        if event.absorbed:
            text += f" ({event.absorbed} absorbed)"
        return f"{text}. Health now {event.target_health}."
    if isinstance(event, HealedEvent):
        return f"{_side_name(event.target)} heal(s) {event.amount}. Health now {event.target_health}."
    if isinstance(event, EffectAppliedEvent):
        target = "you" if event.target == "player" else "the enemy"
        return f"{event.effect_type.title()} ({event.value}) applied to {target} for {event.duration} turn(s)."
    if isinstance(event, EffectTickedEvent):
        if not debug_enabled():
            return None
        return f"[{event.effect_id}] {event.effect_type} ticks for {event.amount}, {event.remaining_duration} left."
    if isinstance(event, EffectExpiredEvent):
        owner = "Your" if event.target == "player" else "Enemy"
        return f"{owner} {event.effect_type} wears off."
    if isinstance(event, NextAttackEmpoweredEvent):
        return "Your next attack will deal double damage."
    if isinstance(event, EnemyActionEvent):
        return f"{event.enemy_name} uses {event.action_name}."
    if isinstance(event, ManaChangedEvent):
        return f"Mana {event.mana}/{event.max_mana}." if debug_enabled() else None
    if isinstance(event, StatChangedEvent):
        owner = "Your" if event.side == "player" else "Enemy"
        label = event.stat.replace("_", " ")
        return f"{owner} {label} changes from {event.old_value} to {event.new_value}."
    if isinstance(event, GoldGainedEvent):
        return f"Gained {event.amount} gold (Total: {event.total_gold})."
    if isinstance(event, ExpGainedEvent):
        return f"Gained {event.amount} experience (Total: {event.total_exp})."
    if isinstance(event, LevelUpEvent):
        return f"Level up! You are now level {event.new_level} ({event.max_health} HP, {event.max_mana} mana)."
    if isinstance(event, LevelUnlockedEvent):
        return f"Level {event.level_id} unlocked."
    if isinstance(event, CardRewardedEvent):
        return f"New card: {event.card_name}."
    if isinstance(event, AchievementUnlockedEvent):
        bonus = f" (+{event.reward_gold} gold)" if event.reward_gold else ""
        return f"Achievement unlocked: {event.name}{bonus}."
    if isinstance(event, ActionRejectedEvent):
        return _REJECTION_TEXT.get(event.reason, event.reason)
    if isinstance(event, BattleEndedEvent):
        result = "Victory!" if event.victory else "Defeat."
        saved = " Progress saved." if event.progress_saved else ""
        return f"{result} The battle lasted {event.turn_count} turn(s).{saved}"
    return str(event) if debug_enabled() else None


def format_events(events: Sequence[BattleEvent]) -> List[str]:
    lines: List[str] = []
    for event in events:
        line = format_event(event)
        if line:
            lines.append(line)
    return lines


def render_events(events: Sequence[BattleEvent]) -> None:
    """Print the visible lines for a batch of events."""
    render_bullet_lines(format_events(events))


def format_battle_view(view: BattleView) -> List[str]:
    """Return the lines of the battle status panel."""
    lines = [f"{view.level_name} - Turn {view.turn}"]
    lines.append(f"{view.enemy.name}: {view.enemy.health}/{view.enemy.max_health} HP, attack {view.enemy_attack}")
    for effect in view.enemy.effects:
        lines.append(f"  * {effect}")
    if view.enemy_intent:
        lines.append(f"  Intent: {view.enemy_intent}")
    lines.append(
        f"{view.player.name}: {view.player.health}/{view.player.max_health} HP, mana {view.mana}/{view.max_mana}"
    )
    for effect in view.player.effects:
        lines.append(f"  * {effect}")
    if view.double_next_attack:
        lines.append("  * Next attack deals double damage")
    lines.append(f"Draw pile: {view.draw_pile_size}  Discard pile: {view.discard_pile_size}")
    lines.append("Hand:")
    for card in view.hand:
        marker = " " if card.playable else "x"
        lines.append(f"{marker}{card.index + 1}. {card.name} [{card.card_type}, {card.mana_cost} mana] {card.description}")
    if debug_enabled():
        lines.append(f"[debug] battle={view.battle_id} phase={view.phase}")
    return lines


def render_battle_view(view: BattleView) -> None:
    render_heading("Battle")
    for line in format_battle_view(view):
        print(line)
