"""Helpers for resolving data file locations."""
from __future__ import annotations

import os
from pathlib import Path

DATA_DIR_ENV = "CARDBATTLE_DATA_DIR"


def get_repo_root() -> Path:
    """Return the repository root."""
    return Path(__file__).resolve().parents[3]


def get_definitions_path(base_path: Path | str | None = None) -> Path:
    """Return the definitions directory.

    An explicit ``base_path`` wins, then the CARDBATTLE_DATA_DIR environment
    variable, then ``data/definitions`` under the repository root.
    """
    if base_path is not None:
        return Path(base_path)
    override = os.getenv(DATA_DIR_ENV)
    if override:
        return Path(override)
    return get_repo_root() / "data" / "definitions"
