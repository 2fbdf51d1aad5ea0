"""Console presenter for level scenes and outcome banners."""
from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, TextIO

from branchtale.data.level_loader import split_lines
from branchtale.presentation.cli.theme import Theme

_LEADING_TAG = re.compile(r"^(\s*)\[\s*([^\]=:]+?)\s*[=:]\s*([^\]]+?)\s*\]")


@dataclass(frozen=True, slots=True)
class ArtLine:
    text: str
    color_name: str = ""


def _parse_leading_tag(raw_line: str) -> tuple[str, str, re.Match[str]] | None:
    match = _LEADING_TAG.match(raw_line)
    if not match:
        return None
    return match.group(2).lower(), match.group(3), match


def parse_art_line(raw_line: str) -> ArtLine:
    """Strip a leading ``[color=NAME]`` tag from an art line."""
    tag = _parse_leading_tag(raw_line)
    if tag is None or tag[0] != "color":
        return ArtLine(text=raw_line)
    _, color_name, match = tag
    return ArtLine(text=match.group(1) + raw_line[match.end():], color_name=color_name)


def parse_default_color_directive(raw_line: str) -> str | None:
    """Return the colour of a standalone ``[default_color=NAME]`` line."""
    tag = _parse_leading_tag(raw_line)
    if tag is None or tag[0] not in ("default_color", "art_color"):
        return None
    key, color_name, match = tag
    if raw_line[match.end():].strip():
        return None
    return color_name


def load_ascii_art(base_directory: str, art_reference: str) -> List[ArtLine] | None:
    """Load an art file relative to the level directory; None when unreadable."""
    art_path = Path(base_directory) / art_reference
    try:
        text = art_path.read_text(encoding="utf-8")
    except (OSError, ValueError):
        return None
    lines: List[ArtLine] = []
    default_color = ""
    for raw_line in split_lines(text):
        directive = parse_default_color_directive(raw_line)
        if directive is not None:
            default_color = directive
            continue
        parsed = parse_art_line(raw_line)
        if not parsed.color_name and default_color:
            parsed = ArtLine(text=parsed.text, color_name=default_color)
        lines.append(parsed)
    return lines


class ConsolePresenter:
    """Writes scenes, banners and errors to a text stream."""

    def __init__(self, theme: Theme | None = None, stream: TextIO | None = None) -> None:
        self._theme = theme or Theme()
        self._stream = stream if stream is not None else sys.stdout

    @property
    def theme(self) -> Theme:
        return self._theme

    def _write(self, text: str = "") -> None:
        print(text, file=self._stream)

    def render_scene(
        self,
        title: str,
        content_lines: Sequence[str],
        art_reference: str,
        base_directory: str,
    ) -> None:
        theme = self._theme
        self._write()
        self._write(theme.colorize(theme.border_line, theme.title_color))
        self._write(theme.colorize(title, theme.title_color))
        self._write(theme.colorize(theme.border_line, theme.title_color))
        self._write()
        for line in content_lines:
            self._write(theme.colorize(line, theme.body_color))
        if not art_reference:
            return
        art = load_ascii_art(base_directory, art_reference)
        if not art:
            self.render_structural_error(f"ASCII art not found: {art_reference}")
            return
        for art_line in art:
            self._write(theme.colorize(art_line.text, art_line.color_name or theme.body_color))
        self._write()

    def render_notice(self, message: str) -> None:
        self._write(self._theme.colorize(message, self._theme.prompt_color))

    def render_victory(self) -> None:
        self._write()
        self._write(self._theme.colorize("[Victory]", self._theme.victory_color))

    def render_game_over(self) -> None:
        self._write()
        self._write(self._theme.colorize("[Game Over]", self._theme.game_over_color))

    def render_structural_error(self, message: str) -> None:
        self._write()
        self._write(self._theme.colorize(f"[Structure Error] {message}", self._theme.error_color))
