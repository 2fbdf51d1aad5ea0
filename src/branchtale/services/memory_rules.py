"""Condition evaluation and mutation application over the game memory."""
from __future__ import annotations

from typing import Iterable, Sequence

from branchtale.domain.defs import MemoryMutation, OptionConditionDef, OptionEffectDef
from branchtale.domain.state import GameContext


def condition_holds(condition: OptionConditionDef, context: GameContext) -> bool:
    """Return True when a single condition block is satisfied."""
    if any(not context.has_flag(flag) for flag in condition.required_flags):
        return False
    if any(context.has_flag(flag) for flag in condition.forbidden_flags):
        return False
    for key, expected in condition.required_values:
        if context.get_value(key) != expected:
            return False
    return not any(context.has_value(key) for key in condition.required_missing_values)


def is_eligible(
    option_id: str, conditions: Sequence[OptionConditionDef], context: GameContext
) -> bool:
    """Return True when every condition block targeting ``option_id`` holds."""
    return all(
        condition_holds(condition, context)
        for condition in conditions
        if condition.option_id == option_id
    )


def apply_mutations(mutations: Iterable[MemoryMutation], context: GameContext) -> None:
    """Apply mutations to the context in order."""
    for mutation in mutations:
        kind = mutation.kind
        if kind == "add_flag":
            context.set_flag(mutation.key)
        elif kind == "clear_flag":
            context.clear_flag(mutation.key)
        elif kind == "set_value":
            context.set_value(mutation.key, mutation.value)
        elif kind == "erase_value":
            context.erase_value(mutation.key)
        else:
            raise ValueError(f"Unknown memory mutation kind '{kind}'.")


def apply_option_effects(
    option_id: str, effects: Sequence[OptionEffectDef], context: GameContext
) -> None:
    """Apply every effect block targeting ``option_id`` in declared order."""
    for effect in effects:
        if effect.option_id == option_id:
            apply_mutations(effect.mutations, context)


def find_unknown_option_id(
    known_ids: Iterable[str],
    conditions: Sequence[OptionConditionDef],
    effects: Sequence[OptionEffectDef],
) -> str | None:
    """Return the first condition or effect id that names no declared option."""
    known = set(known_ids)
    for condition in conditions:
        if condition.option_id not in known:
            return condition.option_id
    for effect in effects:
        if effect.option_id not in known:
            return effect.option_id
    return None
