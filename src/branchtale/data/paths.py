"""Helpers for resolving level and game locations."""
from __future__ import annotations

import os
from pathlib import Path

START_LEVEL_NAME = "start.level"


def get_default_games_path() -> Path:
    """Return the games directory used when none is configured."""
    return Path("games")


def get_default_theme_path() -> Path:
    """Return the theme file used when none is configured."""
    return Path("themes") / "default.theme"


def level_directory(level_path: str) -> str:
    """Return the parent directory of a level file as written."""
    return os.path.dirname(level_path)


def resolve_next_level_path(current_level_path: str, target: str) -> str:
    """Resolve a level target against the file that requested it.

    Absolute targets are only normalised. Relative targets are joined onto the
    parent directory of ``current_level_path`` (not the working directory).
    Resolution is purely lexical; the file is not required to exist.
    """
    if os.path.isabs(target):
        return os.path.normpath(target)
    combined = os.path.join(level_directory(current_level_path), target)
    return os.path.normpath(combined)
