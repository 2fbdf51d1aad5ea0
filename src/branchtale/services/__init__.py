"""Service layer exports."""

from .engine import Engine
from .errors import InputExhaustedError, StructuralError
from .game_catalog import GameEntry, discover_games
from .level_validator import Issue, ValidationReport, format_issue, validate_game
from .levels import (
    ChoiceLevel,
    EndGameLevel,
    InputLevel,
    InputProvider,
    Level,
    Presenter,
    create_level,
)

__all__ = [
    "Engine",
    "InputExhaustedError",
    "StructuralError",
    "GameEntry",
    "discover_games",
    "Issue",
    "ValidationReport",
    "format_issue",
    "validate_game",
    "ChoiceLevel",
    "EndGameLevel",
    "InputLevel",
    "InputProvider",
    "Level",
    "Presenter",
    "create_level",
]
