"""Low-level JSON helpers for repositories."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

from .errors import DataLoadError, DataValidationError


def load_json(path: Path) -> object:
    """Load JSON from disk and raise DataLoadError on failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Definition file not found: {path}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read definition file: {path}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {path}: {exc}") from exc


def load_definitions_file(path: Path) -> Dict[str, object]:
    """Load a definitions file whose top level maps ids to entries."""
    raw = load_json(path)
    if not isinstance(raw, dict):
        raise DataValidationError(f"Expected top-level object in {path}")
    for key in raw:
        if not key.strip():
            raise DataValidationError(f"Blank definition id in {path}")
    return raw
