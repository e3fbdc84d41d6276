"""Cards repository."""
from __future__ import annotations

from typing import Dict, List

from cardbattle.data.errors import DataValidationError
from cardbattle.data.repositories.base import RepositoryBase
from cardbattle.domain.defs import CardDef, EffectGrantDef
from cardbattle.domain.effects import EFFECT_RULES

VALID_CARD_TYPES = {"attack", "defense", "skill", "item"}
CARD_EFFECT_KEYS = {
    "attack": {"poison", "weakness", "burn", "bleed", "stun"},
    "defense": {"thorns", "regen", "regeneration", "reflect", "fortify"},
    "skill": {"heal", "draw", "strength", "mana", "weaken", "double_next"},
    "item": {"gold", "max_health", "max_mana", "transform"},
}
# Skills and items do nothing without an effect key.
EFFECT_KEY_REQUIRED = {"skill", "item"}
GRANT_KINDS = {"damage", "heal", "shield", "draw", "mana", "status"} | set(EFFECT_RULES) | {"regen"}


class CardsRepository(RepositoryBase[CardDef]):
    """Loads and validates card definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("cards.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, CardDef]:
        cards: Dict[str, CardDef] = {}
        for raw_id, payload in raw.items():
            context = f"card '{raw_id}'"
            card_data = self._require_mapping(payload, context)
            self._assert_required(card_data, {"name", "type", "mana_cost", "value"}, context)

            card_type = self._require_literal(card_data["type"], VALID_CARD_TYPES, f"{context} type")
            effect = card_data.get("effect")
            if effect is not None:
                effect = self._require_literal(effect, CARD_EFFECT_KEYS[card_type], f"{context} effect")
            elif card_type in EFFECT_KEY_REQUIRED:
                raise DataValidationError(f"{context} is a {card_type} card and needs an effect.")

            mana_cost = self._require_int(card_data["mana_cost"], f"{context} mana_cost")
            if mana_cost < 0:
                raise DataValidationError(f"{context} mana_cost cannot be negative.")

            cards[raw_id] = CardDef(
                id=raw_id,
                name=self._require_str(card_data["name"], f"{context} name"),
                card_type=card_type,
                mana_cost=mana_cost,
                value=self._require_int(card_data["value"], f"{context} value"),
                description=self._require_str(card_data.get("description", ""), f"{context} description"),
                effect=effect,
                effect_value=self._optional_int(card_data.get("effect_value"), f"{context} effect_value"),
                effect_duration=self._optional_int(card_data.get("effect_duration"), f"{context} effect_duration"),
                effects=tuple(self._build_grants(card_data.get("effects", []), context)),
                starter_copies=self._require_int(card_data.get("starter_copies", 0), f"{context} starter_copies"),
            )
        return cards

    def _build_grants(self, value: object, context: str) -> List[EffectGrantDef]:
        grants: List[EffectGrantDef] = []
        for index, entry in enumerate(self._require_list(value, f"{context} effects")):
            grant_context = f"{context} effects[{index}]"
            grant_data = self._require_mapping(entry, grant_context)
            self._assert_required(grant_data, {"kind"}, grant_context)
            kind = self._require_literal(grant_data["kind"], GRANT_KINDS, f"{grant_context} kind")
            status = grant_data.get("status")
            if kind == "status":
                status = self._require_literal(status, set(EFFECT_RULES) | {"regen"}, f"{grant_context} status")
            elif status is not None:
                raise DataValidationError(f"{grant_context} only 'status' grants may name a status.")
            grants.append(
                EffectGrantDef(
                    kind=kind,
                    value=self._require_int(grant_data.get("value", 0), f"{grant_context} value"),
                    duration=self._optional_int(grant_data.get("duration"), f"{grant_context} duration"),
                    status=status,
                )
            )
        return grants
