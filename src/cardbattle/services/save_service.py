"""Serialization helpers for persisting player progress."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, fields
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Protocol

from cardbattle.data.save_store import SaveSlotStore
from cardbattle.domain.progression import PlayerProgress, ProgressStatistics
from cardbattle.services.errors import SaveLoadError

logger = logging.getLogger(__name__)

SavePayload = Dict[str, Any]


class ProgressStore(Protocol):
    """Persistence provider used by the battle service."""

    def save_progress(self, progress: PlayerProgress) -> bool:
        ...

    def load_progress(self) -> PlayerProgress | None:
        ...


class SaveService:
    """Converts progress to/from a validated, versioned payload stored in one slot."""

    SAVE_VERSION = 1

    def __init__(self, store: SaveSlotStore, slot: int = 1) -> None:
        self._store = store
        self._slot = slot

    @property
    def slot(self) -> int:
        return self._slot

    # -----------------------
    # Provider surface
    # -----------------------
    def save_progress(self, progress: PlayerProgress) -> bool:
        """Write progress to the slot; failures are logged and reported as False."""
        try:
            self._store.write_slot(self._slot, self.serialize(progress))
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not save progress to slot %s: %s", self._slot, exc)
            return False
        logger.debug("Saved progress to slot %s", self._slot)
        return True

    def load_progress(self) -> PlayerProgress | None:
        """Read progress from the slot, or None when it is missing or unreadable."""
        try:
            if not self._store.slot_exists(self._slot):
                return None
            payload = self._store.read_slot(self._slot)
            return self.deserialize(payload)
        except (OSError, json.JSONDecodeError, SaveLoadError) as exc:
            logger.warning("Could not load progress from slot %s: %s", self._slot, exc)
            return None

    # -----------------------
    # Payloads
    # -----------------------
    def serialize(self, progress: PlayerProgress) -> SavePayload:
        """Return a JSON-serializable payload for disk persistence."""
        return {
            "save_version": self.SAVE_VERSION,
            "metadata": {
                "saved_at": datetime.now(timezone.utc).isoformat(),
                "level": progress.level,
                "unlocked_levels": len(progress.unlocked_levels),
                "gold": progress.gold,
            },
            "progress": asdict(progress),
        }

    def deserialize(self, payload: Mapping[str, Any]) -> PlayerProgress:
        """Rehydrate progress from a persisted payload."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        if payload.get("save_version") != self.SAVE_VERSION:
            raise SaveLoadError("Save format is not supported. Please start a new game.")
        data = payload.get("progress")
        if not isinstance(data, Mapping):
            raise SaveLoadError("Save data is missing the progress section.")

        stats_data = data.get("stats", {})
        if not isinstance(stats_data, Mapping):
            raise SaveLoadError("progress.stats must be an object.")
        stats = ProgressStatistics(
            **{
                stat.name: self._coerce_non_negative_int(stats_data.get(stat.name), f"progress.stats.{stat.name}")
                for stat in fields(ProgressStatistics)
            }
        )

        unlocked = self._require_int_list(data.get("unlocked_levels"), "progress.unlocked_levels")
        return PlayerProgress(
            unlocked_levels=unlocked or [1],
            owned_cards=self._require_str_list(data.get("owned_cards"), "progress.owned_cards"),
            equipped_cards=self._require_str_list(data.get("equipped_cards"), "progress.equipped_cards"),
            achievements=self._require_str_list(data.get("achievements", []), "progress.achievements"),
            defeated_enemies=self._require_str_list(data.get("defeated_enemies", []), "progress.defeated_enemies"),
            stats=stats,
            level=self._require_positive_int(data.get("level"), "progress.level"),
            experience=self._coerce_non_negative_int(data.get("experience"), "progress.experience"),
            gold=self._coerce_non_negative_int(data.get("gold"), "progress.gold"),
            max_health=self._require_positive_int(data.get("max_health"), "progress.max_health"),
            max_mana=self._require_positive_int(data.get("max_mana"), "progress.max_mana"),
        )

    @staticmethod
    def _require_positive_int(value: Any, context: str) -> int:
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise SaveLoadError(f"{context} must be a positive integer.")
        return value

    @staticmethod
    def _coerce_non_negative_int(value: Any, context: str) -> int:
        if value is None:
            return 0
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise SaveLoadError(f"{context} must be a non-negative integer.")
        return value

    @staticmethod
    def _require_str_list(value: Any, context: str) -> List[str]:
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise SaveLoadError(f"{context} must be a list of strings.")
        return list(value)

    @staticmethod
    def _require_int_list(value: Any, context: str) -> List[int]:
        if not isinstance(value, list) or not all(
            isinstance(item, int) and not isinstance(item, bool) for item in value
        ):
            raise SaveLoadError(f"{context} must be a list of integers.")
        return list(value)
