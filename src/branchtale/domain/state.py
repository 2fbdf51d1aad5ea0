"""Session state shared by every level of a running game."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Set


@dataclass
class GameContext:
    """Mutable state owned by the engine loop for one play session.

    Memory keys and flags are free-form strings chosen by level authors; no
    namespace is reserved. The context stores values and enforces nothing.
    """

    current_directory: str = ""
    current_level_path: str = ""
    next_level_request: str | None = None
    game_over: bool = False
    victory: bool = False
    memory_values: Dict[str, str] = field(default_factory=dict)
    memory_flags: Set[str] = field(default_factory=set)

    def has_next_level_request(self) -> bool:
        return bool(self.next_level_request)

    def request_next_level(self, target: str) -> None:
        self.next_level_request = target

    def clear_next_level_request(self) -> None:
        self.next_level_request = None

    def has_flag(self, flag: str) -> bool:
        return flag in self.memory_flags

    def set_flag(self, flag: str) -> None:
        self.memory_flags.add(flag)

    def clear_flag(self, flag: str) -> None:
        self.memory_flags.discard(flag)

    def has_value(self, key: str) -> bool:
        return key in self.memory_values

    def get_value(self, key: str) -> str | None:
        """Return the stored value, or None when the key was never set."""
        return self.memory_values.get(key)

    def set_value(self, key: str, value: str) -> None:
        self.memory_values[key] = value

    def erase_value(self, key: str) -> None:
        self.memory_values.pop(key, None)

    @property
    def is_finished(self) -> bool:
        return self.game_over or self.victory
