"""Best-effort parser for the sectioned level description format.

A level file is a sequence of lines grouped under section tags such as
``[HEADER]`` or ``[OPTIONS]``. Each section has its own line grammar; any line
that does not fit the grammar of the active section is skipped. Parsing a
string never raises. Only :func:`parse_level_file` can fail, and only when the
file itself cannot be read.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Dict, List, Tuple

from branchtale.data.level_loader import load_level_text, split_lines
from branchtale.domain.defs import (
    InputRuleDef,
    LevelOptionDef,
    MemoryMutation,
    OptionConditionDef,
    OptionEffectDef,
    ParsedLevel,
)

_SECTION_TAG = re.compile(r"^\s*\[\s*([A-Za-z_]+)\s*\]\s*$")
_OPTION_SEPARATORS = ("->", "=>")
_ON_ENTER_MARKER = "ON_ENTER"

_KNOWN_SECTIONS = {
    "HEADER",
    "CONTENT",
    "OPTIONS",
    "INPUT_RULES",
    "DIRECTIVES",
    "MEMORY",
    "OPTION_CONDITIONS",
    "OPTION_EFFECTS",
}


def parse_level_file(path: Path | str) -> ParsedLevel:
    """Read and parse a level file, raising LevelLoadError if it cannot be read."""
    return parse_level(load_level_text(path))


def parse_level(text: str) -> ParsedLevel:
    """Parse level source text into a :class:`ParsedLevel`."""
    data = ParsedLevel()
    handlers: Dict[str, Callable[[str, ParsedLevel], None]] = {
        "HEADER": _parse_header_line,
        "OPTIONS": _parse_option_line,
        "INPUT_RULES": _parse_input_rule_line,
        "DIRECTIVES": _parse_directive_line,
        "MEMORY": _parse_memory_line,
        "OPTION_CONDITIONS": _parse_condition_line,
        "OPTION_EFFECTS": _parse_effect_line,
    }
    section: str | None = None

    for raw_line in split_lines(text):
        tag = _SECTION_TAG.match(raw_line)
        if tag:
            name = tag.group(1).upper()
            section = name if name in _KNOWN_SECTIONS else None
            continue

        line = raw_line.strip()
        if section == "CONTENT":
            data.content_lines.append(raw_line if line else "")
            continue
        if not line or section is None:
            continue
        handlers[section](line, data)

    return data


def _split_pair(text: str, delimiter: str) -> Tuple[str, str] | None:
    left, sep, right = text.partition(delimiter)
    if not sep:
        return None
    left = left.strip()
    right = right.strip()
    if not left or not right:
        return None
    return left, right


def _parse_header_line(line: str, data: ParsedLevel) -> None:
    pair = _split_pair(line, ":")
    if pair:
        data.header[pair[0]] = pair[1]


def _parse_directive_line(line: str, data: ParsedLevel) -> None:
    pair = _split_pair(line, ":")
    if pair:
        data.directives[pair[0]] = pair[1]


def _split_routed_line(line: str) -> Tuple[str, str, str] | None:
    """Split ``[id |] text -> target`` into ``(id, text, target)``."""
    positions = [(line.find(sep), sep) for sep in _OPTION_SEPARATORS if sep in line]
    if not positions:
        return None
    pos, sep = min(positions)
    declaration = line[:pos].strip()
    target = line[pos + len(sep):].strip()

    item_id = ""
    text = declaration
    if "|" in declaration:
        raw_id, _, raw_text = declaration.partition("|")
        item_id = raw_id.strip()
        text = raw_text.strip()
        if not item_id:
            return None
    if not text or not target:
        return None
    return item_id, text, target


def _parse_option_line(line: str, data: ParsedLevel) -> None:
    parts = _split_routed_line(line)
    if parts:
        item_id, text, target = parts
        data.options.append(LevelOptionDef(text=text, target=target, id=item_id))


def _parse_input_rule_line(line: str, data: ParsedLevel) -> None:
    parts = _split_routed_line(line)
    if parts:
        item_id, pattern, target = parts
        data.input_rules.append(InputRuleDef(pattern=pattern, target=target, id=item_id))


def _tokens(line: str) -> List[Tuple[str, str]]:
    """Return the well-formed ``key=value`` tokens of a line with lowercased keys."""
    pairs: List[Tuple[str, str]] = []
    for token in line.split():
        pair = _split_pair(token, "=")
        if pair:
            pairs.append((pair[0].lower(), pair[1]))
    return pairs


def _parse_mutation(key: str, value: str) -> MemoryMutation | None:
    if key in ("add_flag", "clear_flag", "erase_value"):
        return MemoryMutation(kind=key, key=value)
    if key == "set_value":
        pair = _split_pair(value, ":")
        if pair is None:
            return None
        return MemoryMutation(kind="set_value", key=pair[0], value=pair[1])
    return None


def _parse_memory_line(line: str, data: ParsedLevel) -> None:
    if not any(token.upper() == _ON_ENTER_MARKER for token in line.split()):
        return
    for key, value in _tokens(line):
        mutation = _parse_mutation(key, value)
        if mutation is not None:
            data.on_enter_memory.append(mutation)


def _parse_condition_line(line: str, data: ParsedLevel) -> None:
    condition = OptionConditionDef(option_id="")
    for key, value in _tokens(line):
        if key == "option":
            condition.option_id = value
        elif key == "requires_flag":
            condition.required_flags.append(value)
        elif key == "forbids_flag":
            condition.forbidden_flags.append(value)
        elif key == "requires_value":
            pair = _split_pair(value, ":")
            if pair:
                condition.required_values.append(pair)
        elif key == "requires_missing_value":
            condition.required_missing_values.append(value)
    if condition.option_id:
        data.option_conditions.append(condition)


def _parse_effect_line(line: str, data: ParsedLevel) -> None:
    effect = OptionEffectDef(option_id="")
    for key, value in _tokens(line):
        if key == "option":
            effect.option_id = value
            continue
        mutation = _parse_mutation(key, value)
        if mutation is not None:
            effect.mutations.append(mutation)
    if effect.option_id and effect.mutations:
        data.option_effects.append(effect)
