"""Shared type aliases for the core and domain layers."""
from typing import Literal

LevelMode = Literal["choice", "input", "endgame"]
MatchMode = Literal["exact", "prefix", "contains"]
MutationKind = Literal["add_flag", "clear_flag", "set_value", "erase_value"]

__all__ = ["LevelMode", "MatchMode", "MutationKind"]
