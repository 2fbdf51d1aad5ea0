"""Console theme definition and theme-file loading."""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, TextIO

ANSI_RESET = "\033[0m"

_ANSI_CODES: Dict[str, str] = {
    "default": "\033[39m",
    "black": "\033[30m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "white": "\033[37m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bright_white": "\033[97m",
    "none": "",
    "": "",
}

_TEXT_KEYS = {
    "border_line",
    "title_color",
    "body_color",
    "prompt_color",
    "option_color",
    "victory_color",
    "game_over_color",
    "error_color",
}
_TRUE_TOKENS = {"true", "1", "yes", "on"}
_FALSE_TOKENS = {"false", "0", "no", "off"}


@dataclass(frozen=True, slots=True)
class Theme:
    """Colours and decorations used by the console presenter and menu."""

    border_line: str = "=" * 60
    title_color: str = "bright_cyan"
    body_color: str = "default"
    prompt_color: str = "bright_yellow"
    option_color: str = "default"
    victory_color: str = "bright_green"
    game_over_color: str = "bright_red"
    error_color: str = "bright_red"
    use_color: bool = False

    def colorize(self, text: str, color_name: str) -> str:
        """Wrap text in the ANSI code for ``color_name`` when colour is enabled."""
        if not self.use_color:
            return text
        code = ansi_color_code(color_name)
        if not code:
            return text
        return f"{code}{text}{ANSI_RESET}"


def ansi_color_code(color_name: str) -> str:
    """Return the escape code for a colour name, or '' when unknown."""
    return _ANSI_CODES.get(color_name.strip().lower(), "")


def color_enabled_for_terminal(stream: TextIO | None = None) -> bool:
    """Return True when ``stream`` is a TTY and NO_COLOR is not set."""
    target = stream if stream is not None else sys.stdout
    isatty = getattr(target, "isatty", None)
    if isatty is None or not isatty():
        return False
    return os.environ.get("NO_COLOR") is None


def _parse_bool(value: str) -> bool | None:
    lowered = value.strip().lower()
    if lowered in _TRUE_TOKENS:
        return True
    if lowered in _FALSE_TOKENS:
        return False
    return None


def load_theme(path: Path | str, base_theme: Theme | None = None) -> Theme:
    """Overlay ``key = value`` settings from a theme file onto ``base_theme``.

    A missing or unreadable file yields the base theme unchanged. Blank lines,
    ``#`` comments, unknown keys and malformed lines are ignored.
    """
    theme = base_theme or Theme()
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, ValueError):
        return theme

    updates: Dict[str, object] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip().lower()
        value = value.strip()
        if key in _TEXT_KEYS:
            updates[key] = value
        elif key == "use_color":
            parsed = _parse_bool(value)
            if parsed is not None:
                updates[key] = parsed
    return replace(theme, **updates)
