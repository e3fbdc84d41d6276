"""Status effect registry and query helpers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Literal, Sequence

from cardbattle.core.types import Side

EffectType = Literal[
    "poison",
    "burn",
    "bleed",
    "regeneration",
    "shield",
    "thorns",
    "reflect",
    "weakness",
    "strength",
    "stun",
    "disarm",
]
TickKind = Literal["damage", "heal", "none"]
EffectCategory = Literal["dot", "hot", "reactive", "flag"]


@dataclass(frozen=True, slots=True)
class EffectRule:
    """How an effect type behaves once it is active."""

    tick: TickKind
    category: EffectCategory
    default_value: int
    default_duration: int
    label: str


EFFECT_RULES: Dict[str, EffectRule] = {
    "poison": EffectRule("damage", "dot", 2, 3, "Poison"),
    "burn": EffectRule("damage", "dot", 2, 3, "Burn"),
    "bleed": EffectRule("damage", "dot", 1, 3, "Bleed"),
    "regeneration": EffectRule("heal", "hot", 2, 3, "Regeneration"),
    "shield": EffectRule("none", "reactive", 5, 1, "Shield"),
    "thorns": EffectRule("none", "reactive", 1, 2, "Thorns"),
    "reflect": EffectRule("none", "reactive", 50, 1, "Reflect"),
    "weakness": EffectRule("none", "reactive", 1, 2, "Weakness"),
    "strength": EffectRule("none", "reactive", 2, 3, "Strength"),
    "stun": EffectRule("none", "flag", 0, 1, "Stun"),
    "disarm": EffectRule("none", "flag", 0, 1, "Disarm"),
}

# Catalog spellings that map onto a registered effect type.
EFFECT_ALIASES: Dict[str, str] = {"regen": "regeneration"}


@dataclass(slots=True)
class ActiveEffect:
    """A live status instance.

    ``source`` is the side that granted the effect and decides when it ticks;
    ``target`` is the side it afflicts or benefits.
    """

    effect_id: str
    effect_type: str
    value: int
    duration: int
    source: Side
    target: Side

    @property
    def rule(self) -> EffectRule:
        return EFFECT_RULES[self.effect_type]


def normalize_effect_type(name: str) -> str | None:
    """Return the registered effect type for ``name`` or None when unknown."""
    resolved = EFFECT_ALIASES.get(name, name)
    return resolved if resolved in EFFECT_RULES else None


def is_effect_type(name: str) -> bool:
    return normalize_effect_type(name) is not None


def effects_of(
    effects: Iterable[ActiveEffect],
    effect_type: str,
    *,
    target: Side | None = None,
    source: Side | None = None,
) -> List[ActiveEffect]:
    """Return matching effects in insertion order."""
    return [
        effect
        for effect in effects
        if effect.effect_type == effect_type
        and (target is None or effect.target == target)
        and (source is None or effect.source == source)
    ]


def find_effect(
    effects: Iterable[ActiveEffect],
    effect_type: str,
    *,
    target: Side | None = None,
    source: Side | None = None,
) -> ActiveEffect | None:
    matches = effects_of(effects, effect_type, target=target, source=source)
    return matches[0] if matches else None


def has_effect(
    effects: Iterable[ActiveEffect],
    effect_type: str,
    *,
    target: Side | None = None,
    source: Side | None = None,
) -> bool:
    return find_effect(effects, effect_type, target=target, source=source) is not None


def total_value(
    effects: Iterable[ActiveEffect],
    effect_type: str,
    *,
    target: Side | None = None,
    source: Side | None = None,
) -> int:
    return sum(effect.value for effect in effects_of(effects, effect_type, target=target, source=source))


def remove_effect(effects: List[ActiveEffect], effect_id: str) -> ActiveEffect | None:
    """Remove an effect by id, returning it if it was present."""
    for idx, effect in enumerate(effects):
        if effect.effect_id == effect_id:
            return effects.pop(idx)
    return None


def owned_by(effects: Sequence[ActiveEffect], side: Side) -> List[ActiveEffect]:
    """Return a snapshot of the effects that tick on ``side``'s turn."""
    return [effect for effect in effects if effect.source == side]


def describe_effect(effect: ActiveEffect) -> str:
    """Return a short English description of an active effect."""
    turns = f"{effect.duration} turn(s) left"
    kind = effect.effect_type
    if kind in ("poison", "burn", "bleed"):
        return f"{effect.rule.label}: takes {effect.value} damage each turn, {turns}"
    if kind == "regeneration":
        return f"Regeneration: restores {effect.value} health each turn, {turns}"
    if kind == "shield":
        return f"Shield: absorbs {effect.value} damage, {turns}"
    if kind == "strength":
        return f"Strength: attacks deal {effect.value} more damage, {turns}"
    if kind == "weakness":
        return f"Weakness: attacks deal {effect.value} less damage, {turns}"
    if kind == "thorns":
        return f"Thorns: returns up to {effect.value} damage to attackers, {turns}"
    if kind == "reflect":
        return f"Reflect: returns {effect.value}% of damage taken, {turns}"
    if kind == "stun":
        return f"Stun: skips the next action, {turns}"
    if kind == "disarm":
        return f"Disarm: cannot play attack cards, {turns}"
    return f"{kind}: value {effect.value}, {turns}"
