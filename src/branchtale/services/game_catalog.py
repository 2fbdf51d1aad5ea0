"""Discovery of playable games under a games directory."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from branchtale.data.paths import START_LEVEL_NAME


@dataclass(frozen=True, slots=True)
class GameEntry:
    """A directory that can be played because it holds a start level."""

    name: str
    root: Path

    @property
    def start_level(self) -> Path:
        return self.root / START_LEVEL_NAME


def discover_games(games_root: Path | str) -> List[GameEntry]:
    """Return the playable games directly under ``games_root`` sorted by name."""
    root = Path(games_root)
    games: List[GameEntry] = []
    for entry in root.iterdir():
        if entry.is_dir() and (entry / START_LEVEL_NAME).is_file():
            games.append(GameEntry(name=entry.name, root=entry))
    return sorted(games, key=lambda game: game.name)
