from dataclasses import replace

from cardbattle.domain.defs import CardDef, EffectGrantDef
from cardbattle.domain.effects import find_effect
from cardbattle.services import card_resolution
from cardbattle.services.battle_events import (
    CardPlayedEvent,
    DamageDealtEvent,
    GoldGainedEvent,
    HandTransformedEvent,
    ManaChangedEvent,
    NextAttackEmpoweredEvent,
)
from tests.helpers.battle_builders import DEFEND, POISON_BLADE, STRIKE, make_ctx


def _play(ctx, index=0, pool=()):
    events = []
    card = card_resolution.resolve_card(ctx, index, list(pool), events)
    return card, events


def test_strike_pays_mana_and_moves_to_discard() -> None:
    ctx = make_ctx(hand=[STRIKE])
    card, events = _play(ctx)

    assert ctx.enemy.health == 14
    assert ctx.player.mana == 2
    assert ctx.deck.discard_pile == [card]
    assert ctx.stats.cards_played == 1
    assert isinstance(events[0], CardPlayedEvent)
    assert isinstance(events[1], ManaChangedEvent)


def test_attack_effect_targets_enemy_and_is_sourced_by_player() -> None:
    ctx = make_ctx(hand=[POISON_BLADE])
    _play(ctx)

    poison = find_effect(ctx.effects, "poison")
    assert poison is not None
    assert (poison.source, poison.target) == ("player", "enemy")
    assert (poison.value, poison.duration) == (2, 3)
    assert ctx.enemy.health == 16


def test_lethal_attack_skips_secondary_effects() -> None:
    ctx = make_ctx(hand=[POISON_BLADE])
    ctx.enemy.health = 3
    _play(ctx)

    assert ctx.state.is_victory
    assert ctx.effects == []


def test_strength_and_double_next_stack_on_the_next_attack() -> None:
    focus = CardDef(id="focus", name="Focus", card_type="skill", mana_cost=0, value=0, effect="double_next")
    cry = CardDef(id="cry", name="Battle Cry", card_type="skill", mana_cost=0, value=2, effect="strength")
    ctx = make_ctx(hand=[cry, focus, STRIKE, replace(STRIKE)])

    _play(ctx)
    _, events = _play(ctx)
    assert any(isinstance(evt, NextAttackEmpoweredEvent) for evt in events)
    _play(ctx)
    assert ctx.enemy.health == 20 - (6 + 2) * 2
    assert not ctx.double_next_attack

    _play(ctx)
    assert ctx.enemy.health == 0
    assert ctx.state.is_victory


def test_defense_card_grants_shield_for_one_turn() -> None:
    ctx = make_ctx(hand=[DEFEND])
    _play(ctx)

    shield = find_effect(ctx.effects, "shield", target="player")
    assert shield is not None
    assert (shield.value, shield.duration) == (5, 1)


def test_defense_secondary_effect_uses_effect_duration() -> None:
    spiked = CardDef(
        id="spiked", name="Spiked", card_type="defense", mana_cost=1, value=3,
        effect="thorns", effect_value=2, effect_duration=3,
    )
    ctx = make_ctx(hand=[spiked])
    _play(ctx)

    assert find_effect(ctx.effects, "shield").duration == 1
    thorns = find_effect(ctx.effects, "thorns")
    assert (thorns.value, thorns.duration, thorns.target) == (2, 3, "player")


def test_fortify_raises_max_health() -> None:
    fortify = CardDef(id="fortify", name="Fortify", card_type="defense", mana_cost=1, value=2, effect="fortify")
    ctx = make_ctx(hand=[fortify], player_health=50)
    _play(ctx)

    assert ctx.player.max_health == 55
    assert ctx.player.health == 55


def test_skill_cards() -> None:
    heal = CardDef(id="heal", name="Heal", card_type="skill", mana_cost=1, value=8, effect="heal")
    draw = CardDef(id="draw", name="Quick Draw", card_type="skill", mana_cost=0, value=2, effect="draw")
    weaken = CardDef(id="weaken", name="Intimidate", card_type="skill", mana_cost=0, value=2, effect="weaken")
    ctx = make_ctx(hand=[heal, draw, weaken], draw_pile=[STRIKE, DEFEND])
    ctx.player.health = 45

    _play(ctx)
    assert ctx.player.health == 50
    assert ctx.stats.healing == 5

    _play(ctx)
    assert {card.id for card in ctx.deck.hand} == {"weaken", "strike", "defend"}

    _play(ctx)
    assert ctx.enemy.attack == 3


def test_item_cards() -> None:
    pouch = CardDef(id="pouch", name="Pouch", card_type="item", mana_cost=0, value=15, effect="gold")
    crystal = CardDef(id="crystal", name="Crystal", card_type="item", mana_cost=0, value=1, effect="max_mana")
    ctx = make_ctx(hand=[pouch, crystal])

    _, events = _play(ctx)
    assert ctx.stats.gold_earned == 15
    assert isinstance(events[-1], GoldGainedEvent)

    _play(ctx)
    assert ctx.player.max_mana == 4
    assert ctx.player.mana == 4


def test_transform_replaces_every_other_card_in_hand() -> None:
    orb = CardDef(id="orb", name="Chaos Orb", card_type="item", mana_cost=0, value=0, effect="transform")
    ctx = make_ctx(hand=[orb, STRIKE, replace(STRIKE)])

    _, events = _play(ctx, pool=[DEFEND])

    assert [card.id for card in ctx.deck.hand] == ["defend", "defend"]
    assert ctx.deck.hand[0] is not ctx.deck.hand[1]
    assert isinstance(events[-1], HandTransformedEvent)


def test_extra_effect_grants() -> None:
    vampiric = CardDef(
        id="vampiric", name="Vampiric", card_type="attack", mana_cost=1, value=5,
        effects=(EffectGrantDef(kind="heal", value=3), EffectGrantDef(kind="weakness", value=1)),
    )
    ctx = make_ctx(hand=[vampiric])
    ctx.player.health = 40
    _play(ctx)

    assert ctx.player.health == 43
    weakness = find_effect(ctx.effects, "weakness")
    assert weakness.target == "enemy"
    assert weakness.source == "player"


def test_direct_damage_grant_counts_as_damage_dealt() -> None:
    bomb = CardDef(
        id="bomb", name="Bomb", card_type="attack", mana_cost=1, value=0,
        effects=(EffectGrantDef(kind="damage", value=4),),
    )
    ctx = make_ctx(hand=[bomb])
    _, events = _play(ctx)

    direct = [evt for evt in events if isinstance(evt, DamageDealtEvent) and evt.kind == "direct"]
    assert direct[0].amount == 4
    assert ctx.stats.damage_dealt == 4
