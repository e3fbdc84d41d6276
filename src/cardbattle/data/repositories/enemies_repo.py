"""Enemies repository."""
from __future__ import annotations

from typing import Dict, List

from cardbattle.data.errors import DataValidationError
from cardbattle.data.repositories.base import RepositoryBase
from cardbattle.domain.defs import (
    ActionCondition,
    AttackAction,
    BuffAction,
    DebuffAction,
    EnemyAction,
    EnemyDef,
    HealAction,
    SpecialAction,
)

VALID_ACTION_TYPES = {"attack", "heal", "buff", "debuff", "special"}
VALID_CONDITIONS = {"health_below", "health_above", "player_health_below", "turn_count", "random"}
VALID_BUFFS = {"strength", "shield", "regen", "regeneration", "thorns", "reflect"}
VALID_DEBUFFS = {"weakness", "poison", "burn", "bleed", "disarm", "stun"}
VALID_SPECIALS = {"multi_attack", "summon", "life_steal", "execute_below", "discard"}


class EnemiesRepository(RepositoryBase[EnemyDef]):
    """Loads and validates enemy definitions and their behaviour."""

    def __init__(self, base_path=None) -> None:
        super().__init__("enemies.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, EnemyDef]:
        enemies: Dict[str, EnemyDef] = {}
        for raw_id, payload in raw.items():
            context = f"enemy '{raw_id}'"
            enemy_data = self._require_mapping(payload, context)
            self._assert_required(enemy_data, {"name", "health", "attack"}, context)

            health = self._require_int(enemy_data["health"], f"{context} health")
            if health <= 0:
                raise DataValidationError(f"{context} health must be positive.")

            enemies[raw_id] = EnemyDef(
                id=raw_id,
                name=self._require_str(enemy_data["name"], f"{context} name"),
                health=health,
                attack=self._require_int(enemy_data["attack"], f"{context} attack"),
                description=self._require_str(enemy_data.get("description", ""), f"{context} description"),
                actions=tuple(self._build_actions(enemy_data.get("actions", []), f"{context} actions")),
                patterns=tuple(self._build_actions(enemy_data.get("patterns", []), f"{context} patterns")),
            )
        return enemies

    def _build_actions(self, value: object, context: str) -> List[EnemyAction]:
        return [
            self._build_action(entry, f"{context}[{index}]")
            for index, entry in enumerate(self._require_list(value, context))
        ]

    def _build_action(self, payload: object, context: str) -> EnemyAction:
        data = self._require_mapping(payload, context)
        self._assert_required(data, {"type", "name"}, context)
        action_type = self._require_literal(data["type"], VALID_ACTION_TYPES, f"{context} type")
        name = self._require_str(data["name"], f"{context} name")
        value = self._optional_int(data.get("value"), f"{context} value")
        duration = self._optional_int(data.get("duration"), f"{context} duration")
        condition = self._build_condition(data.get("condition"), f"{context} condition")

        if action_type == "attack":
            effect = data.get("effect")
            if effect is not None:
                effect = self._require_literal(effect, VALID_DEBUFFS, f"{context} effect")
            return AttackAction(
                name=name,
                value=value,
                multiplier=self._require_int(data.get("multiplier", 1), f"{context} multiplier"),
                effect=effect,
                effect_value=self._optional_int(data.get("effect_value"), f"{context} effect_value"),
                effect_duration=self._optional_int(data.get("effect_duration"), f"{context} effect_duration"),
                condition=condition,
            )
        if action_type == "heal":
            return HealAction(name=name, value=value, condition=condition)
        if action_type == "buff":
            buff = self._require_literal(data.get("buff"), VALID_BUFFS, f"{context} buff")
            return BuffAction(name=name, buff=buff, value=value, duration=duration, condition=condition)
        if action_type == "debuff":
            debuff = self._require_literal(data.get("debuff"), VALID_DEBUFFS, f"{context} debuff")
            return DebuffAction(name=name, debuff=debuff, value=value, duration=duration, condition=condition)
        special = self._require_literal(data.get("special"), VALID_SPECIALS, f"{context} special")
        return SpecialAction(
            name=name,
            special=special,
            value=value,
            count=self._optional_int(data.get("count"), f"{context} count"),
            steal_percent=self._optional_int(data.get("steal_percent"), f"{context} steal_percent"),
            threshold=self._optional_int(data.get("threshold"), f"{context} threshold"),
            condition=condition,
        )

    def _build_condition(self, payload: object, context: str) -> ActionCondition | None:
        if payload is None:
            return None
        data = self._require_mapping(payload, context)
        self._assert_required(data, {"type", "value"}, context)
        kind = self._require_literal(data["type"], VALID_CONDITIONS, f"{context} type")
        threshold = self._require_number(data["value"], f"{context} value")
        if kind == "random" and not 0.0 <= threshold <= 1.0:
            raise DataValidationError(f"{context} random probability must be within [0, 1].")
        return ActionCondition(kind=kind, value=threshold)
