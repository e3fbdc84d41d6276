"""Engine configuration helpers and per-user persistence."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(slots=True)
class EngineConfig:
    """Tunable numbers for battles and progression."""

    hand_size: int = 5
    starting_health: int = 100
    starting_mana: int = 3
    exp_per_level: int = 100
    level_up_health: int = 10
    level_up_mana: int = 1
    log_level: str = "WARNING"


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "CardBattle"
        return Path.home() / "CardBattle"
    return Path.home() / ".config" / "cardbattle"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_save_dir() -> Path:
    """Return the per-user save directory."""
    return get_user_data_dir() / "saves"


def _normalize(raw: Dict[str, Any]) -> EngineConfig:
    defaults = EngineConfig()
    values: Dict[str, Any] = {}
    for config_field in fields(EngineConfig):
        name = config_field.name
        default = getattr(defaults, name)
        value = raw.get(name, default)
        if name == "log_level":
            value = value.upper() if isinstance(value, str) else default
            values[name] = value if value in _VALID_LOG_LEVELS else default
            continue
        # bool is an int subclass; reject it explicitly
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            value = default
        values[name] = value
    return EngineConfig(**values)


def load_config(path: Path | None = None) -> EngineConfig:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return EngineConfig()
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return EngineConfig()
    if not isinstance(raw, dict):
        return EngineConfig()
    return _normalize(raw)


def save_config(config: EngineConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(_normalize(asdict(config)))
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
