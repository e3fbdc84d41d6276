"""Damage and healing pipeline.

The pipeline mutates the combatants and the shared effect list it is given
(shields are consumed as they absorb) but owns no other state.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from cardbattle.domain.effects import ActiveEffect, remove_effect, effects_of, find_effect
from cardbattle.domain.entities import Combatant


@dataclass(slots=True)
class MitigationResult:
    """Outcome of weakness, shields and health loss for a single hit."""

    attempted: int
    absorbed: int
    damage_dealt: int
    was_lethal: bool
    broken_shields: List[ActiveEffect] = field(default_factory=list)


@dataclass(slots=True)
class DamageResult:
    """Outcome of a hit including any counter damage to the attacker."""

    hit: MitigationResult
    thorns: MitigationResult | None = None
    reflect: MitigationResult | None = None

    @property
    def damage_dealt(self) -> int:
        return self.hit.damage_dealt

    @property
    def was_lethal(self) -> bool:
        return self.hit.was_lethal

    @property
    def absorbed(self) -> int:
        return self.hit.absorbed

    @property
    def thorns_damage(self) -> int:
        return self.thorns.damage_dealt if self.thorns is not None else 0

    @property
    def reflect_damage(self) -> int:
        return self.reflect.damage_dealt if self.reflect is not None else 0

    @property
    def attacker_lethal(self) -> bool:
        return any(counter is not None and counter.was_lethal for counter in (self.thorns, self.reflect))


def apply_weakness(amount: int, effects: List[ActiveEffect], attacker: Combatant) -> int:
    """Reduce outgoing damage by the attacker's weakness, floored at zero."""
    weakness = find_effect(effects, "weakness", target=attacker.side)
    if weakness is None:
        return amount
    return max(0, amount - weakness.value)


def absorb_with_shields(
    amount: int, effects: List[ActiveEffect], defender: Combatant
) -> tuple[int, List[ActiveEffect]]:
    """Consume the defender's shields in insertion order.

    Returns the damage left over and the shields that were used up.
    """
    remaining = amount
    broken: List[ActiveEffect] = []
    for shield in effects_of(effects, "shield", target=defender.side):
        if remaining <= 0:
            break
        if remaining <= shield.value:
            shield.value -= remaining
            remaining = 0
            if shield.value <= 0:
                remove_effect(effects, shield.effect_id)
                broken.append(shield)
        else:
            remaining -= shield.value
            remove_effect(effects, shield.effect_id)
            broken.append(shield)
    return remaining, broken


def mitigate(
    amount: int,
    attacker: Combatant | None,
    defender: Combatant,
    effects: List[ActiveEffect],
) -> MitigationResult:
    """Run weakness (when there is an attacker), shields and health loss."""
    attempted = apply_weakness(amount, effects, attacker) if attacker is not None else max(0, amount)
    remaining, broken = absorb_with_shields(attempted, effects, defender)
    dealt = defender.take_damage(remaining) if remaining > 0 else 0
    return MitigationResult(
        attempted=attempted,
        absorbed=attempted - remaining,
        damage_dealt=dealt,
        was_lethal=not defender.is_alive,
        broken_shields=broken,
    )


def resolve_damage(
    base_amount: int,
    attacker: Combatant,
    defender: Combatant,
    effects: List[ActiveEffect],
) -> DamageResult:
    """Resolve an attack from ``attacker`` on ``defender``.

    Thorns and reflect only fire when damage reached the defender's health.
    Counter damage goes through weakness and shields with the roles swapped
    and never triggers further counters.
    """
    hit = mitigate(base_amount, attacker, defender, effects)
    result = DamageResult(hit=hit)
    if hit.damage_dealt <= 0:
        return result

    thorns = find_effect(effects, "thorns", target=defender.side)
    if thorns is not None and attacker.is_alive:
        result.thorns = mitigate(min(hit.damage_dealt, thorns.value), defender, attacker, effects)

    reflect = find_effect(effects, "reflect", target=defender.side)
    if reflect is not None and attacker.is_alive:
        reflected = hit.damage_dealt * reflect.value // 100
        if reflected > 0:
            result.reflect = mitigate(reflected, defender, attacker, effects)
    return result


def apply_heal(combatant: Combatant, amount: int) -> int:
    """Heal with a simple max-health clamp; no mitigation applies."""
    return combatant.heal(amount)


def apply_direct_damage(defender: Combatant, amount: int, effects: List[ActiveEffect]) -> MitigationResult:
    """Damage with no attacker: skips weakness and counters but not shields."""
    return mitigate(amount, None, defender, effects)
