"""Slot-based JSON storage for player progress files."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from cardbattle.core.config import get_save_dir

SLOT_FILE_TEMPLATE = "progress_{slot}.json"


@dataclass(slots=True)
class SlotSummary:
    """Menu-facing summary of one save slot."""

    slot: int
    exists: bool
    is_corrupt: bool = False
    saved_at: str | None = None
    level: int | None = None
    gold: int | None = None

    @property
    def is_empty(self) -> bool:
        return not self.exists


class SaveSlotStore:
    """Reads and writes numbered progress slots under one directory."""

    def __init__(self, base_dir: Path | str | None = None, slot_count: int = 3) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else get_save_dir()
        self._slot_count = slot_count

    @property
    def slot_count(self) -> int:
        return self._slot_count

    def slot_path(self, slot: int) -> Path:
        self._check_slot(slot)
        return self._base_dir / SLOT_FILE_TEMPLATE.format(slot=slot)

    def summaries(self) -> List[SlotSummary]:
        """Summarize every slot; unreadable files are flagged rather than raised."""
        return [self._summarize(slot) for slot in range(1, self._slot_count + 1)]

    def slot_exists(self, slot: int) -> bool:
        return self.slot_path(slot).is_file()

    def read_slot(self, slot: int) -> Dict[str, Any]:
        """Return the decoded payload; OSError and JSONDecodeError propagate."""
        return json.loads(self.slot_path(slot).read_text(encoding="utf-8"))

    def write_slot(self, slot: int, payload: Dict[str, Any]) -> None:
        """Write ``payload`` through a temporary file so a crash never truncates a save."""
        path = self.slot_path(slot)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp_path, path)

    def delete_slot(self, slot: int) -> bool:
        """Remove the slot file; returns False when there was nothing to delete."""
        path = self.slot_path(slot)
        if not path.exists():
            return False
        path.unlink()
        return True

    def _summarize(self, slot: int) -> SlotSummary:
        if not self.slot_exists(slot):
            return SlotSummary(slot=slot, exists=False)
        try:
            payload = self.read_slot(slot)
        except (OSError, json.JSONDecodeError):
            return SlotSummary(slot=slot, exists=True, is_corrupt=True)
        metadata = payload.get("metadata") if isinstance(payload, dict) else None
        if not isinstance(metadata, dict):
            return SlotSummary(slot=slot, exists=True, is_corrupt=True)
        return SlotSummary(
            slot=slot,
            exists=True,
            saved_at=metadata.get("saved_at"),
            level=metadata.get("level"),
            gold=metadata.get("gold"),
        )

    def _check_slot(self, slot: int) -> None:
        if not 1 <= slot <= self._slot_count:
            raise ValueError(f"Slot index must be between 1 and {self._slot_count}.")
