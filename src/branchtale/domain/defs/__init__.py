"""Definition dataclasses for parsed level files."""

from .level_def import (
    InputRuleDef,
    LevelOptionDef,
    MemoryMutation,
    OptionConditionDef,
    OptionEffectDef,
    ParsedLevel,
    resolve_option_id,
    resolve_rule_id,
)

__all__ = [
    "InputRuleDef",
    "LevelOptionDef",
    "MemoryMutation",
    "OptionConditionDef",
    "OptionEffectDef",
    "ParsedLevel",
    "resolve_option_id",
    "resolve_rule_id",
]
