"""Low-level text helpers for level files."""
from __future__ import annotations

from pathlib import Path
from typing import List

from .errors import LevelLoadError


def load_level_text(path: Path | str) -> str:
    """Read a level file as UTF-8 and raise LevelLoadError on failure."""
    file_path = Path(path)
    try:
        return file_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise LevelLoadError(f"Could not open level file: {file_path}") from exc
    except UnicodeDecodeError as exc:
        raise LevelLoadError(f"Level file is not valid UTF-8: {file_path}") from exc
    except (OSError, ValueError) as exc:
        # ValueError covers paths the OS cannot represent, such as embedded NUL bytes.
        raise LevelLoadError(f"Unable to read level file: {file_path!r}") from exc


def split_lines(text: str) -> List[str]:
    """Split text on ``\\n`` only, dropping a trailing ``\\r`` from each line.

    Form feeds, vertical tabs and Unicode line separators stay inside the line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]
