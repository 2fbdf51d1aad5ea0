"""CLI configuration helpers: user config file, environment and logging."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict

from branchtale.data.paths import get_default_games_path, get_default_theme_path

_CONFIG_KEYS = ("games_dir", "theme_file")
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "Branchtale"
        return Path.home() / "Branchtale"
    return Path.home() / ".config" / "branchtale"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def default_config() -> Dict[str, str]:
    return {
        "games_dir": str(get_default_games_path()),
        "theme_file": str(get_default_theme_path()),
    }


def _normalize(raw: Dict[str, object]) -> Dict[str, str]:
    config = default_config()
    for key in _CONFIG_KEYS:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            config[key] = value.strip()
    return config


def load_config(path: Path | None = None) -> Dict[str, str]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default_config()
    except (OSError, ValueError):
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return _normalize(raw)


def save_config(config: Dict[str, str], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = _normalize(dict(config))
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def debug_enabled() -> bool:
    """Return True only when BRANCHTALE_DEBUG is explicitly set to '1'."""
    return os.getenv("BRANCHTALE_DEBUG") == "1"


def resolve_log_level(requested: str | None = None) -> int:
    """Pick the log level from the CLI flag, then the environment, then WARNING."""
    if not requested and debug_enabled():
        return logging.DEBUG
    name = (requested or os.getenv("BRANCHTALE_LOG_LEVEL") or "WARNING").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(requested: str | None = None) -> None:
    """Send log records to stderr so they never mix with the game on stdout."""
    logging.basicConfig(level=resolve_log_level(requested), format=_LOG_FORMAT)
