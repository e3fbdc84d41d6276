"""Enemy decision procedure: choose one action per enemy turn and execute it."""
from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from cardbattle.core.types import Side
from cardbattle.domain.battle_models import BattleContext
from cardbattle.domain.defs import (
    ActionCondition,
    AttackAction,
    BuffAction,
    DebuffAction,
    EnemyAction,
    HealAction,
    SpecialAction,
)
from cardbattle.domain.effects import EFFECT_RULES, normalize_effect_type
from cardbattle.services import combat_pipeline as pipeline
from cardbattle.services.battle_events import (
    BattleEvent,
    CardDiscardedEvent,
    DamageDealtEvent,
    EnemyActionEvent,
)

logger = logging.getLogger(__name__)

# (value, duration) used when an action leaves them out.
BUFF_DEFAULTS: Dict[str, Tuple[int, int]] = {
    "strength": (2, 3),
    "shield": (5, 1),
    "regeneration": (3, 3),
    "thorns": (2, 2),
    "reflect": (50, 1),
}
DEBUFF_DEFAULTS: Dict[str, Tuple[int, int]] = {
    "weakness": (2, 2),
    "poison": (2, 3),
    "burn": (3, 2),
    "bleed": (1, 3),
    "disarm": (0, 1),
    "stun": (0, 1),
}
HEAL_PERCENT_DEFAULT = 20
MULTI_ATTACK_COUNT = 3
SUMMON_ATTACK_BONUS = 3
LIFE_STEAL_PERCENT = 50
EXECUTE_THRESHOLD = 30


# -----------------------
# Selection
# -----------------------
def condition_passes(condition: ActionCondition | None, ctx: BattleContext) -> bool:
    """Evaluate an action gate; a missing condition always passes."""
    if condition is None:
        return True
    kind = condition.kind
    if kind == "health_below":
        return ctx.enemy.health_percent < condition.value
    if kind == "health_above":
        return ctx.enemy.health_percent > condition.value
    if kind == "player_health_below":
        return ctx.player.health_percent < condition.value
    if kind == "turn_count":
        return ctx.state.turn_count >= condition.value
    if kind == "random":
        return ctx.rng.chance(condition.value)
    logger.warning("Unknown action condition '%s'; treating it as passed", kind)
    return True


def select_action(ctx: BattleContext) -> EnemyAction | None:
    """Pick this turn's action; None means a plain attack."""
    enemy_def = ctx.enemy_def
    if enemy_def.patterns:
        return enemy_def.patterns[ctx.state.turn_count % len(enemy_def.patterns)]
    if enemy_def.actions:
        candidates = [action for action in enemy_def.actions if condition_passes(action.condition, ctx)]
        if not candidates:
            return None
        return ctx.rng.choice(candidates)
    return None


def preview_next_action(ctx: BattleContext) -> str | None:
    """Describe the upcoming pattern action; random action lists are not previewable."""
    enemy_def = ctx.enemy_def
    if enemy_def.patterns:
        action = enemy_def.patterns[ctx.state.turn_count % len(enemy_def.patterns)]
        return describe_action(action, ctx)
    if enemy_def.actions:
        return None
    return f"Attack for {ctx.enemy.attack}"


def describe_action(action: EnemyAction, ctx: BattleContext) -> str:
    attack = ctx.enemy.attack
    if isinstance(action, AttackAction):
        damage = (action.value or attack) * action.multiplier
        text = f"{action.name}: attack for {damage}"
        return f"{text} and inflict {action.effect}" if action.effect else text
    if isinstance(action, HealAction):
        return f"{action.name}: heal"
    if isinstance(action, BuffAction):
        return f"{action.name}: gain {action.buff}"
    if isinstance(action, DebuffAction):
        return f"{action.name}: inflict {action.debuff}"
    if isinstance(action, SpecialAction):
        return f"{action.name}: {action.special.replace('_', ' ')}"
    return "Unknown intent"


# -----------------------
# Execution
# -----------------------
def take_turn(ctx: BattleContext, events: List[BattleEvent]) -> None:
    """Select and execute exactly one action for the enemy."""
    action = select_action(ctx)
    if action is None:
        events.append(EnemyActionEvent(enemy_name=ctx.enemy.name, action_name="Attack", action_type="attack"))
        plain_attack(ctx, events)
        return
    execute_action(ctx, action, events)


def plain_attack(ctx: BattleContext, events: List[BattleEvent]) -> None:
    pipeline.deal_attack(ctx, "enemy", ctx.enemy.attack, events)


def execute_action(ctx: BattleContext, action: EnemyAction, events: List[BattleEvent]) -> None:
    enemy_name = ctx.enemy.name
    if isinstance(action, AttackAction):
        events.append(EnemyActionEvent(enemy_name=enemy_name, action_name=action.name, action_type="attack"))
        _attack(ctx, action, events)
    elif isinstance(action, HealAction):
        events.append(EnemyActionEvent(enemy_name=enemy_name, action_name=action.name, action_type="heal"))
        amount = action.value or ctx.enemy.max_health * HEAL_PERCENT_DEFAULT // 100
        pipeline.heal(ctx, "enemy", amount, events)
    elif isinstance(action, BuffAction):
        events.append(EnemyActionEvent(enemy_name=enemy_name, action_name=action.name, action_type="buff"))
        _grant(ctx, action.buff, action.value, action.duration, BUFF_DEFAULTS, "enemy", events)
    elif isinstance(action, DebuffAction):
        events.append(EnemyActionEvent(enemy_name=enemy_name, action_name=action.name, action_type="debuff"))
        _grant(ctx, action.debuff, action.value, action.duration, DEBUFF_DEFAULTS, "player", events)
    elif isinstance(action, SpecialAction):
        events.append(EnemyActionEvent(enemy_name=enemy_name, action_name=action.name, action_type="special"))
        _special(ctx, action, events)
    else:
        logger.warning("Unknown enemy action %r; falling back to a plain attack", action)
        events.append(EnemyActionEvent(enemy_name=enemy_name, action_name="Attack", action_type="attack"))
        plain_attack(ctx, events)
    pipeline.check_termination(ctx)


def _attack(ctx: BattleContext, action: AttackAction, events: List[BattleEvent]) -> None:
    damage = (action.value or ctx.enemy.attack) * action.multiplier
    pipeline.deal_attack(ctx, "enemy", damage, events)
    if ctx.state.is_game_over or action.effect is None:
        return
    effect_type = normalize_effect_type(action.effect)
    if effect_type is None:
        logger.warning("Enemy action '%s' has unknown effect '%s'", action.name, action.effect)
        return
    rule = EFFECT_RULES[effect_type]
    pipeline.grant_effect(
        ctx,
        effect_type,
        action.effect_value or rule.default_value,
        action.effect_duration or rule.default_duration,
        source="enemy",
        target="player",
        events=events,
    )


def _grant(
    ctx: BattleContext,
    name: str,
    value: int | None,
    duration: int | None,
    defaults: Dict[str, Tuple[int, int]],
    target: Side,
    events: List[BattleEvent],
) -> None:
    effect_type = normalize_effect_type(name)
    if effect_type is None or effect_type not in defaults:
        logger.warning("Enemy cannot apply unknown effect '%s'", name)
        return
    default_value, default_duration = defaults[effect_type]
    pipeline.grant_effect(
        ctx,
        effect_type,
        value or default_value,
        duration or default_duration,
        source="enemy",
        target=target,
        events=events,
    )


def _special(ctx: BattleContext, action: SpecialAction, events: List[BattleEvent]) -> None:
    enemy = ctx.enemy
    special = action.special
    if special == "multi_attack":
        count = action.count or MULTI_ATTACK_COUNT
        # every hit lands for at least 1 even when attack is smaller than the hit count
        per_hit = action.value or max(1, enemy.attack // count)
        for _ in range(count):
            pipeline.deal_attack(ctx, "enemy", per_hit, events)
            if ctx.state.is_game_over:
                return
    elif special == "summon":
        pipeline.change_enemy_attack(ctx, enemy.attack + (action.value or SUMMON_ATTACK_BONUS), events)
    elif special == "life_steal":
        result = pipeline.deal_attack(ctx, "enemy", action.value or enemy.attack, events)
        if ctx.state.is_game_over:
            return
        percent = action.steal_percent or LIFE_STEAL_PERCENT
        pipeline.heal(ctx, "enemy", result.damage_dealt * percent // 100, events)
    elif special == "execute_below":
        threshold = action.threshold or EXECUTE_THRESHOLD
        if ctx.player.health_percent <= threshold:
            lost = ctx.player.take_damage(ctx.player.health)
            events.append(
                DamageDealtEvent(source="enemy", target="player", amount=lost, absorbed=0, target_health=0, kind="execute")
            )
            pipeline.check_termination(ctx)
        else:
            plain_attack(ctx, events)
    elif special == "discard":
        _force_discard(ctx, action.count or action.value or 1, events)
    else:
        logger.warning("Unknown special action '%s'; falling back to a plain attack", special)
        plain_attack(ctx, events)


def _force_discard(ctx: BattleContext, count: int, events: List[BattleEvent]) -> None:
    hand = ctx.deck.hand
    for _ in range(count):
        if not hand:
            return
        card = ctx.deck.discard(ctx.rng.pick_index(len(hand)))
        events.append(CardDiscardedEvent(card_id=card.id, card_name=card.name, forced=True))
