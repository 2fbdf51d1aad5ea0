"""Data layer utilities for loading and parsing level files."""

from .errors import DataError, LevelLoadError
from .level_parser import parse_level, parse_level_file
from .paths import resolve_next_level_path

__all__ = [
    "DataError",
    "LevelLoadError",
    "parse_level",
    "parse_level_file",
    "resolve_next_level_path",
]
