"""Resolution of played cards against a battle context."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Sequence

from cardbattle.core.types import Side
from cardbattle.domain.battle_models import BattleContext
from cardbattle.domain.defs import CardDef, EffectGrantDef
from cardbattle.domain.effects import EFFECT_RULES, normalize_effect_type, total_value
from cardbattle.services import combat_pipeline as pipeline
from cardbattle.services.battle_events import (
    BattleEvent,
    CardPlayedEvent,
    GoldGainedEvent,
    HandTransformedEvent,
    ManaChangedEvent,
    NextAttackEmpoweredEvent,
    StatChangedEvent,
)

logger = logging.getLogger(__name__)

# Effect types that afflict the opponent when granted by an extra effect entry.
_HOSTILE_EFFECTS = {"poison", "burn", "bleed", "weakness", "stun", "disarm"}

FORTIFY_DEFAULT = 5


def _or_default(value: int | None, default: int) -> int:
    return value if value is not None else default


def resolve_card(
    ctx: BattleContext,
    hand_index: int,
    card_pool: Sequence[CardDef],
    events: List[BattleEvent],
) -> CardDef:
    """Pay for and resolve the card at ``hand_index``.

    The caller has already validated the index, mana and disarm gates.
    """
    player = ctx.player
    card = ctx.deck.card_at(hand_index)
    player.spend_mana(card.mana_cost)
    ctx.deck.discard(hand_index)
    ctx.stats.cards_played += 1
    events.append(CardPlayedEvent(card_id=card.id, card_name=card.name, mana_cost=card.mana_cost))
    events.append(ManaChangedEvent(mana=player.mana, max_mana=player.max_mana))
    logger.debug("Resolving %s (%s)", card.id, card.card_type)

    if card.card_type == "attack":
        _resolve_attack(ctx, card, events)
    elif card.card_type == "defense":
        _resolve_defense(ctx, card, events)
    elif card.card_type == "skill":
        _resolve_skill(ctx, card, events)
    elif card.card_type == "item":
        _resolve_item(ctx, card, card_pool, events)
    else:
        logger.warning("Card '%s' has unknown type '%s'", card.id, card.card_type)

    for grant in card.effects:
        if ctx.state.is_game_over:
            break
        _apply_grant(ctx, card, grant, events)
    return card


def attack_damage(ctx: BattleContext, card: CardDef) -> int:
    """Base damage of an attack card including strength and double-next."""
    damage = card.value + total_value(ctx.effects, "strength", target="player")
    if ctx.double_next_attack:
        damage *= 2
    return damage


def _resolve_attack(ctx: BattleContext, card: CardDef, events: List[BattleEvent]) -> None:
    damage = attack_damage(ctx, card)
    ctx.double_next_attack = False
    pipeline.deal_attack(ctx, "player", damage, events)
    if ctx.state.is_game_over or card.effect is None:
        return
    rule = EFFECT_RULES.get(card.effect)
    if rule is None:
        logger.warning("Card '%s' has unknown attack effect '%s'", card.id, card.effect)
        return
    pipeline.grant_effect(
        ctx,
        card.effect,
        _or_default(card.effect_value, rule.default_value),
        _or_default(card.effect_duration, rule.default_duration),
        source="player",
        target="enemy",
        events=events,
    )


def _resolve_defense(ctx: BattleContext, card: CardDef, events: List[BattleEvent]) -> None:
    # effect_duration belongs to the secondary effect when the card has one
    shield_duration = _or_default(card.effect_duration, 1) if card.effect is None else 1
    pipeline.grant_effect(ctx, "shield", card.value, shield_duration, source="player", target="player", events=events)
    if card.effect is None:
        return
    if card.effect == "fortify":
        amount = _or_default(card.effect_value, FORTIFY_DEFAULT)
        old_max = ctx.player.max_health
        ctx.player.raise_max_health(amount)
        events.append(StatChangedEvent(side="player", stat="max_health", old_value=old_max, new_value=ctx.player.max_health))
        return
    effect_type = normalize_effect_type(card.effect)
    if effect_type not in ("thorns", "regeneration", "reflect"):
        logger.warning("Card '%s' has unknown defense effect '%s'", card.id, card.effect)
        return
    rule = EFFECT_RULES[effect_type]
    pipeline.grant_effect(
        ctx,
        effect_type,
        _or_default(card.effect_value, rule.default_value),
        _or_default(card.effect_duration, rule.default_duration),
        source="player",
        target="player",
        events=events,
    )


def _resolve_skill(ctx: BattleContext, card: CardDef, events: List[BattleEvent]) -> None:
    effect = card.effect
    if effect == "heal":
        pipeline.heal(ctx, "player", card.value, events)
    elif effect == "draw":
        pipeline.draw_cards(ctx, card.value or 1, events)
    elif effect == "strength":
        pipeline.grant_effect(
            ctx,
            "strength",
            card.value or EFFECT_RULES["strength"].default_value,
            _or_default(card.effect_duration, EFFECT_RULES["strength"].default_duration),
            source="player",
            target="player",
            events=events,
        )
    elif effect == "mana":
        pipeline.restore_mana(ctx, card.value or 1, events)
    elif effect == "weaken":
        pipeline.change_enemy_attack(ctx, max(0, ctx.enemy.attack - (card.value or 1)), events)
    elif effect == "double_next":
        ctx.double_next_attack = True
        events.append(NextAttackEmpoweredEvent())
    else:
        logger.warning("Card '%s' has unknown skill effect '%s'", card.id, effect)


def _resolve_item(
    ctx: BattleContext, card: CardDef, card_pool: Sequence[CardDef], events: List[BattleEvent]
) -> None:
    player = ctx.player
    effect = card.effect
    if effect == "gold":
        amount = card.value or 10
        player.gold += amount
        ctx.stats.gold_earned += amount
        events.append(GoldGainedEvent(amount=amount, total_gold=player.gold))
    elif effect == "max_health":
        old_max = player.max_health
        player.raise_max_health(card.value or 5)
        events.append(StatChangedEvent(side="player", stat="max_health", old_value=old_max, new_value=player.max_health))
    elif effect == "max_mana":
        old_max = player.max_mana
        player.raise_max_mana(card.value or 1)
        events.append(StatChangedEvent(side="player", stat="max_mana", old_value=old_max, new_value=player.max_mana))
        events.append(ManaChangedEvent(mana=player.mana, max_mana=player.max_mana))
    elif effect == "transform":
        _transform_hand(ctx, card_pool, events)
    else:
        logger.warning("Card '%s' has unknown item effect '%s'", card.id, effect)


def _transform_hand(ctx: BattleContext, card_pool: Sequence[CardDef], events: List[BattleEvent]) -> None:
    if not card_pool or not ctx.deck.hand:
        return
    old_ids = [card.id for card in ctx.deck.hand]
    for index in range(len(ctx.deck.hand)):
        ctx.deck.replace_in_hand(index, replace(ctx.rng.choice(card_pool)))
    events.append(HandTransformedEvent(old_card_ids=old_ids, new_card_ids=[card.id for card in ctx.deck.hand]))


def _apply_grant(ctx: BattleContext, card: CardDef, grant: EffectGrantDef, events: List[BattleEvent]) -> None:
    kind = grant.kind
    if kind == "damage":
        pipeline.deal_direct_damage(ctx, "enemy", grant.value, events, source="player")
    elif kind == "heal":
        pipeline.heal(ctx, "player", grant.value, events)
    elif kind == "shield":
        pipeline.grant_effect(
            ctx, "shield", grant.value, _or_default(grant.duration, 1), source="player", target="player", events=events
        )
    elif kind == "draw":
        pipeline.draw_cards(ctx, grant.value or 1, events)
    elif kind == "mana":
        pipeline.restore_mana(ctx, grant.value, events)
    elif kind == "status":
        effect_type = normalize_effect_type(grant.status or "")
        if effect_type is None:
            logger.warning("Card '%s' grants unknown status '%s'", card.id, grant.status)
            return
        pipeline.grant_effect(
            ctx, effect_type, grant.value, _or_default(grant.duration, 1), source="player", target="player", events=events
        )
    else:
        effect_type = normalize_effect_type(kind)
        if effect_type is None:
            logger.warning("Card '%s' has unknown extra effect '%s'", card.id, kind)
            return
        rule = EFFECT_RULES[effect_type]
        target: Side = "enemy" if effect_type in _HOSTILE_EFFECTS else "player"
        pipeline.grant_effect(
            ctx,
            effect_type,
            grant.value or rule.default_value,
            _or_default(grant.duration, rule.default_duration),
            source="player",
            target=target,
            events=events,
        )
