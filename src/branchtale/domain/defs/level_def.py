"""Level document structures produced by the parser."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from branchtale.core.types import MutationKind


@dataclass(frozen=True, slots=True)
class MemoryMutation:
    """Single change applied to the game memory.

    ``value`` is only meaningful for ``set_value`` mutations.
    """

    kind: MutationKind
    key: str
    value: str = ""


@dataclass(slots=True)
class LevelOptionDef:
    """Selectable option on a choice level."""

    text: str
    target: str
    id: str = ""


@dataclass(slots=True)
class InputRuleDef:
    """Free-text pattern routed to a target on an input level."""

    pattern: str
    target: str
    id: str = ""


@dataclass(slots=True)
class OptionConditionDef:
    """Eligibility requirements for one option or input rule."""

    option_id: str
    required_flags: List[str] = field(default_factory=list)
    forbidden_flags: List[str] = field(default_factory=list)
    required_values: List[Tuple[str, str]] = field(default_factory=list)
    required_missing_values: List[str] = field(default_factory=list)


@dataclass(slots=True)
class OptionEffectDef:
    """Mutations applied when one option or input rule is chosen."""

    option_id: str
    mutations: List[MemoryMutation] = field(default_factory=list)


@dataclass(slots=True)
class ParsedLevel:
    """Everything the parser could recover from one level file."""

    header: Dict[str, str] = field(default_factory=dict)
    content_lines: List[str] = field(default_factory=list)
    options: List[LevelOptionDef] = field(default_factory=list)
    input_rules: List[InputRuleDef] = field(default_factory=list)
    directives: Dict[str, str] = field(default_factory=dict)
    on_enter_memory: List[MemoryMutation] = field(default_factory=list)
    option_conditions: List[OptionConditionDef] = field(default_factory=list)
    option_effects: List[OptionEffectDef] = field(default_factory=list)


def resolve_option_id(option: LevelOptionDef, index: int) -> str:
    """Return the explicit id or the positional ``option_<n>`` fallback."""
    return option.id or f"option_{index + 1}"


def resolve_rule_id(rule: InputRuleDef, index: int) -> str:
    """Return the explicit id or the positional ``rule_<n>`` fallback."""
    return rule.id or f"rule_{index + 1}"
