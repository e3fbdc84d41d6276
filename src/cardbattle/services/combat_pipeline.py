"""Health, effect and termination plumbing shared by cards and enemy actions.

Every function here mutates a ``BattleContext`` and appends the matching
events to the list it is handed. Callers must stop as soon as
``ctx.state.is_game_over`` becomes true.
"""
from __future__ import annotations

import logging
from typing import List

from cardbattle.core.types import Side, opponent_of
from cardbattle.domain.battle_models import BattleContext
from cardbattle.domain.damage import DamageResult, MitigationResult, apply_direct_damage, resolve_damage
from cardbattle.domain.deck import DrawResult
from cardbattle.domain.effects import ActiveEffect, EFFECT_RULES, owned_by, remove_effect
from cardbattle.services.battle_events import (
    BattleEvent,
    CardDrawnEvent,
    DamageDealtEvent,
    DamageKind,
    EffectAppliedEvent,
    EffectExpiredEvent,
    EffectTickedEvent,
    HealedEvent,
    ManaChangedEvent,
    PileRecycledEvent,
    StatChangedEvent,
)

logger = logging.getLogger(__name__)


# -----------------------
# Termination
# -----------------------
def check_termination(ctx: BattleContext) -> bool:
    """Mark the battle over when either side has fallen; victory wins ties."""
    state = ctx.state
    if state.is_game_over:
        return True
    if not ctx.enemy.is_alive:
        state.is_victory = True
    elif not ctx.player.is_alive:
        state.is_victory = False
    else:
        return False
    state.is_game_over = True
    state.phase = "battle_over"
    logger.debug("Battle %s over, victory=%s", ctx.battle_id, state.is_victory)
    return True


# -----------------------
# Damage and Healing
# -----------------------
def _record_damage(ctx: BattleContext, source: Side | None, target: Side, amount: int) -> None:
    if target == "enemy" and source != "enemy":
        ctx.stats.damage_dealt += amount


def _emit_mitigation(
    ctx: BattleContext,
    events: List[BattleEvent],
    result: MitigationResult,
    source: Side | None,
    target: Side,
    kind: DamageKind,
) -> None:
    _record_damage(ctx, source, target, result.damage_dealt)
    events.append(
        DamageDealtEvent(
            source=source,
            target=target,
            amount=result.damage_dealt,
            absorbed=result.absorbed,
            target_health=ctx.combatant(target).health,
            kind=kind,
        )
    )
    for shield in result.broken_shields:
        events.append(EffectExpiredEvent(effect_id=shield.effect_id, effect_type="shield", target=shield.target))


def deal_attack(ctx: BattleContext, attacker: Side, amount: int, events: List[BattleEvent]) -> DamageResult:
    """Run an attack through the damage pipeline, counters included."""
    defender = opponent_of(attacker)
    result = resolve_damage(amount, ctx.combatant(attacker), ctx.combatant(defender), ctx.effects)
    _emit_mitigation(ctx, events, result.hit, attacker, defender, "attack")
    if result.thorns is not None:
        _emit_mitigation(ctx, events, result.thorns, defender, attacker, "thorns")
    if result.reflect is not None:
        _emit_mitigation(ctx, events, result.reflect, defender, attacker, "reflect")
    check_termination(ctx)
    return result


def deal_direct_damage(
    ctx: BattleContext,
    target: Side,
    amount: int,
    events: List[BattleEvent],
    *,
    source: Side | None = None,
    kind: DamageKind = "direct",
) -> MitigationResult:
    """Damage that skips weakness and counters but still hits shields."""
    result = apply_direct_damage(ctx.combatant(target), amount, ctx.effects)
    _emit_mitigation(ctx, events, result, source, target, kind)
    check_termination(ctx)
    return result


def heal(ctx: BattleContext, target: Side, amount: int, events: List[BattleEvent]) -> int:
    combatant = ctx.combatant(target)
    healed = combatant.heal(amount)
    if target == "player":
        ctx.stats.healing += healed
    events.append(HealedEvent(target=target, amount=healed, target_health=combatant.health))
    return healed


def restore_mana(ctx: BattleContext, amount: int, events: List[BattleEvent]) -> int:
    restored = ctx.player.restore_mana(amount)
    events.append(ManaChangedEvent(mana=ctx.player.mana, max_mana=ctx.player.max_mana))
    return restored


def change_enemy_attack(ctx: BattleContext, new_value: int, events: List[BattleEvent]) -> None:
    old_value = ctx.enemy.attack
    ctx.enemy.attack = new_value
    events.append(StatChangedEvent(side="enemy", stat="attack", old_value=old_value, new_value=new_value))


# -----------------------
# Cards
# -----------------------
def emit_draws(result: DrawResult, events: List[BattleEvent]) -> None:
    """Translate a deck draw into events in the order things happened."""
    for index, card in enumerate(result.drawn):
        if index == result.recycled_after:
            events.append(PileRecycledEvent(card_count=result.recycled_cards))
        events.append(CardDrawnEvent(card_id=card.id, card_name=card.name))


def draw_cards(ctx: BattleContext, count: int | None, events: List[BattleEvent]) -> DrawResult:
    """Draw ``count`` cards, or fill the hand to its size when ``count`` is None."""
    if count is None:
        result = ctx.deck.draw_to_hand_size(ctx.rng, ctx.hand_size)
    else:
        result = ctx.deck.draw(ctx.rng, count)
    emit_draws(result, events)
    return result


# -----------------------
# Effects
# -----------------------
def grant_effect(
    ctx: BattleContext,
    effect_type: str,
    value: int,
    duration: int,
    *,
    source: Side,
    target: Side,
    events: List[BattleEvent],
) -> ActiveEffect | None:
    """Append a new effect instance; unknown types are logged and skipped."""
    if effect_type not in EFFECT_RULES:
        logger.warning("Ignoring unknown effect type '%s'", effect_type)
        return None
    effect = ActiveEffect(
        effect_id=ctx.next_effect_id(),
        effect_type=effect_type,
        value=value,
        duration=max(1, duration),
        source=source,
        target=target,
    )
    ctx.effects.append(effect)
    events.append(
        EffectAppliedEvent(
            effect_id=effect.effect_id,
            effect_type=effect.effect_type,
            value=effect.value,
            duration=effect.duration,
            source=source,
            target=target,
        )
    )
    # Enemy strength lives in the attack stat rather than being read on demand.
    if effect_type == "strength" and target == "enemy":
        change_enemy_attack(ctx, ctx.enemy.attack + value, events)
    return effect


def expire_effect(ctx: BattleContext, effect: ActiveEffect, events: List[BattleEvent]) -> None:
    if remove_effect(ctx.effects, effect.effect_id) is None:
        return
    events.append(EffectExpiredEvent(effect_id=effect.effect_id, effect_type=effect.effect_type, target=effect.target))
    if effect.effect_type == "strength" and effect.target == "enemy":
        change_enemy_attack(ctx, max(1, ctx.enemy.attack - effect.value), events)


def tick_effects(ctx: BattleContext, side: Side, events: List[BattleEvent]) -> None:
    """Run the turn-start tick for every effect ``side`` granted.

    Effects are processed in insertion order. A lethal tick ends the battle
    and leaves the remaining effects untouched.
    """
    for effect in owned_by(ctx.effects, side):
        if not any(active is effect for active in ctx.effects):
            # consumed earlier in this tick, e.g. a shield soaking a DOT
            continue
        amount = 0
        tick = effect.rule.tick
        if tick == "damage":
            result = deal_direct_damage(ctx, effect.target, effect.value, events, source=effect.source, kind="effect")
            amount = result.damage_dealt
        elif tick == "heal":
            amount = heal(ctx, effect.target, effect.value, events)

        effect.duration -= 1
        events.append(
            EffectTickedEvent(
                effect_id=effect.effect_id,
                effect_type=effect.effect_type,
                target=effect.target,
                amount=amount,
                remaining_duration=effect.duration,
            )
        )
        if effect.duration <= 0:
            expire_effect(ctx, effect, events)
        if ctx.state.is_game_over:
            return
