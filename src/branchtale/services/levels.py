"""Runtime level variants and the factory that selects them.

The set of variants is closed: ``choice``, ``input`` and ``endgame``. Each
variant is built from a freshly parsed level, renders its scene through a
presenter and then executes once against the shared :class:`GameContext`.
Execution always ends in exactly one outcome: a next-level request, game over
or victory.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Protocol, Sequence, Union

from branchtale.core.types import MatchMode
from branchtale.domain.defs import (
    InputRuleDef,
    LevelOptionDef,
    MemoryMutation,
    OptionConditionDef,
    OptionEffectDef,
    ParsedLevel,
    resolve_option_id,
    resolve_rule_id,
)
from branchtale.domain.state import GameContext
from branchtale.services.errors import StructuralError
from branchtale.services.memory_rules import (
    apply_mutations,
    apply_option_effects,
    find_unknown_option_id,
    is_eligible,
)

logger = logging.getLogger(__name__)

CHOICE_PROMPT = "Choose an option:"
DEFAULT_INPUT_PROMPT = "What do you do?"
DEFAULT_INVALID_MESSAGE = "Nothing happens. Try again."
_TRUTHY = {"true", "1", "yes", "on"}
_MATCH_MODES = {"exact", "prefix", "contains"}


class Presenter(Protocol):
    """Output collaborator; purely observational."""

    def render_scene(
        self,
        title: str,
        content_lines: Sequence[str],
        art_reference: str,
        base_directory: str,
    ) -> None: ...

    def render_structural_error(self, message: str) -> None: ...

    def render_notice(self, message: str) -> None: ...

    def render_victory(self) -> None: ...

    def render_game_over(self) -> None: ...


class InputProvider(Protocol):
    """Input collaborator used by choice and input levels."""

    def pick(self, labels: Sequence[str], prompt: str) -> int:
        """Return the index of the chosen label; raise InputExhaustedError at end of input."""
        ...

    def read_line(self, prompt: str) -> str | None:
        """Return one line without its newline, or None at end of input."""
        ...


def build_title(header: Mapping[str, str], fallback: str) -> str:
    """Pick the display title from the header, falling back per level kind."""
    title = header.get("title", "")
    if title:
        return title
    level_id = header.get("id", "")
    if level_id:
        return f"Level: {level_id}"
    return fallback


def parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUTHY


@dataclass(slots=True)
class _Scene:
    title: str
    art_reference: str
    content_lines: List[str]

    @classmethod
    def from_parsed(cls, data: ParsedLevel, fallback_title: str) -> "_Scene":
        return cls(
            title=build_title(data.header, fallback_title),
            art_reference=data.header.get("ascii_art", ""),
            content_lines=list(data.content_lines),
        )

    def render(self, context: GameContext, presenter: Presenter) -> None:
        presenter.render_scene(
            self.title, list(self.content_lines), self.art_reference, context.current_directory
        )


def _end_with_structural_error(
    context: GameContext, presenter: Presenter, error: StructuralError
) -> None:
    logger.warning("Structural error in %s: %s", context.current_level_path or "<level>", error)
    context.game_over = True
    presenter.render_structural_error(str(error))


@dataclass(slots=True)
class ChoiceLevel:
    """Multiple-choice level: the player picks one of the eligible options."""

    scene: _Scene
    options: List[LevelOptionDef]
    on_enter_memory: List[MemoryMutation] = field(default_factory=list)
    option_conditions: List[OptionConditionDef] = field(default_factory=list)
    option_effects: List[OptionEffectDef] = field(default_factory=list)
    _executed: bool = field(default=False, init=False, repr=False)

    @classmethod
    def from_parsed(cls, data: ParsedLevel) -> "ChoiceLevel":
        options = [
            LevelOptionDef(text=option.text, target=option.target, id=resolve_option_id(option, index))
            for index, option in enumerate(data.options)
        ]
        return cls(
            scene=_Scene.from_parsed(data, "Untitled Level"),
            options=options,
            on_enter_memory=list(data.on_enter_memory),
            option_conditions=list(data.option_conditions),
            option_effects=list(data.option_effects),
        )

    @property
    def title(self) -> str:
        return self.scene.title

    def render(self, context: GameContext, presenter: Presenter) -> None:
        self.scene.render(context, presenter)

    def visible_options(self, context: GameContext) -> List[LevelOptionDef]:
        """Return the options whose conditions currently hold, in declared order."""
        return [
            option
            for option in self.options
            if is_eligible(option.id, self.option_conditions, context)
        ]

    def execute(
        self, context: GameContext, presenter: Presenter, input_provider: InputProvider
    ) -> None:
        _mark_executed(self)
        apply_mutations(self.on_enter_memory, context)
        try:
            visible = self._checked_visible_options(context)
        except StructuralError as exc:
            _end_with_structural_error(context, presenter, exc)
            return

        try:
            index = input_provider.pick([option.text for option in visible], CHOICE_PROMPT)
            selected = visible[index]
        except (Exception, KeyboardInterrupt) as exc:
            logger.info("Selection aborted in %s: %s", context.current_level_path, exc)
            context.game_over = True
            return

        apply_option_effects(selected.id, self.option_effects, context)
        context.request_next_level(selected.target)

    def _checked_visible_options(self, context: GameContext) -> List[LevelOptionDef]:
        unknown = find_unknown_option_id(
            (option.id for option in self.options), self.option_conditions, self.option_effects
        )
        if unknown is not None:
            raise StructuralError(f"Unknown option id in rule: `{unknown}`.")
        if not self.options:
            raise StructuralError("Choice level has no options.")
        visible = self.visible_options(context)
        if not visible:
            raise StructuralError("No visible options after evaluating memory conditions.")
        return visible


@dataclass(slots=True)
class InputLevel:
    """Free-text level: typed lines are matched against input rules."""

    scene: _Scene
    rules: List[InputRuleDef]
    on_enter_memory: List[MemoryMutation] = field(default_factory=list)
    option_conditions: List[OptionConditionDef] = field(default_factory=list)
    option_effects: List[OptionEffectDef] = field(default_factory=list)
    prompt: str = DEFAULT_INPUT_PROMPT
    invalid_message: str = DEFAULT_INVALID_MESSAGE
    match_mode: MatchMode = "contains"
    case_sensitive: bool = False
    _executed: bool = field(default=False, init=False, repr=False)

    @classmethod
    def from_parsed(cls, data: ParsedLevel) -> "InputLevel":
        directives: Dict[str, str] = data.directives
        rules = [
            InputRuleDef(pattern=rule.pattern, target=rule.target, id=resolve_rule_id(rule, index))
            for index, rule in enumerate(data.input_rules)
        ]
        match_mode = directives.get("input_match", "contains")
        if match_mode not in _MATCH_MODES:
            match_mode = "contains"
        return cls(
            scene=_Scene.from_parsed(data, "Input Level"),
            rules=rules,
            on_enter_memory=list(data.on_enter_memory),
            option_conditions=list(data.option_conditions),
            option_effects=list(data.option_effects),
            prompt=directives.get("input_prompt", DEFAULT_INPUT_PROMPT),
            invalid_message=directives.get("input_invalid_message", DEFAULT_INVALID_MESSAGE),
            match_mode=match_mode,
            case_sensitive=parse_bool(directives.get("input_case_sensitive", "false")),
        )

    @property
    def title(self) -> str:
        return self.scene.title

    def render(self, context: GameContext, presenter: Presenter) -> None:
        self.scene.render(context, presenter)

    def matches(self, pattern: str, user_input: str) -> bool:
        """Return True when ``user_input`` matches ``pattern`` under this level's policy."""
        if not self.case_sensitive:
            pattern = pattern.lower()
            user_input = user_input.lower()
        if self.match_mode == "exact":
            return user_input == pattern
        if self.match_mode == "prefix":
            return user_input.startswith(pattern)
        return pattern in user_input

    def find_rule(self, user_input: str, context: GameContext) -> InputRuleDef | None:
        """Return the first eligible rule matching the input."""
        for rule in self.rules:
            if not is_eligible(rule.id, self.option_conditions, context):
                continue
            if self.matches(rule.pattern, user_input):
                return rule
        return None

    def execute(
        self, context: GameContext, presenter: Presenter, input_provider: InputProvider
    ) -> None:
        _mark_executed(self)
        apply_mutations(self.on_enter_memory, context)
        unknown = find_unknown_option_id(
            (rule.id for rule in self.rules), self.option_conditions, self.option_effects
        )
        if unknown is not None:
            _end_with_structural_error(
                context, presenter, StructuralError(f"Unknown rule id in condition/effect: `{unknown}`.")
            )
            return
        if not self.rules:
            _end_with_structural_error(
                context, presenter, StructuralError("Input level has no input rules.")
            )
            return

        while True:
            try:
                user_input = input_provider.read_line(self.prompt)
            except (Exception, KeyboardInterrupt) as exc:
                logger.info("Input aborted in %s: %s", context.current_level_path, exc)
                context.game_over = True
                return
            if user_input is None:
                logger.info("Input exhausted in %s", context.current_level_path)
                context.game_over = True
                return
            rule = self.find_rule(user_input, context)
            if rule is not None:
                apply_option_effects(rule.id, self.option_effects, context)
                context.request_next_level(rule.target)
                return
            presenter.render_notice(self.invalid_message)


@dataclass(slots=True)
class EndGameLevel:
    """Terminal level that ends the session with victory or game over."""

    scene: _Scene
    result: str | None = None
    _executed: bool = field(default=False, init=False, repr=False)

    @classmethod
    def from_parsed(cls, data: ParsedLevel) -> "EndGameLevel":
        return cls(
            scene=_Scene.from_parsed(data, "End Game"),
            result=data.directives.get("result"),
        )

    @property
    def title(self) -> str:
        return self.scene.title

    def render(self, context: GameContext, presenter: Presenter) -> None:
        self.scene.render(context, presenter)

    def execute(
        self, context: GameContext, presenter: Presenter, input_provider: InputProvider
    ) -> None:
        _mark_executed(self)
        if self.result == "victory":
            context.victory = True
            presenter.render_victory()
            return
        if self.result == "game_over":
            context.game_over = True
            presenter.render_game_over()
            return
        if self.result is None:
            error = StructuralError("EndGame level must define `result: victory|game_over`.")
        else:
            error = StructuralError(
                f"Invalid endgame result `{self.result}`. Expected `victory` or `game_over`."
            )
        _end_with_structural_error(context, presenter, error)


Level = Union[ChoiceLevel, InputLevel, EndGameLevel]


def _mark_executed(level: Level) -> None:
    if level._executed:
        raise RuntimeError(f"Level '{level.title}' has already been executed.")
    level._executed = True


def create_level(data: ParsedLevel) -> Level:
    """Build the variant declared by the ``input_mode`` directive."""
    mode = data.directives.get("input_mode", "choice")
    if mode == "endgame":
        return EndGameLevel.from_parsed(data)
    if mode == "input":
        return InputLevel.from_parsed(data)
    if mode != "choice":
        logger.warning("Unknown input_mode '%s'; treating level as a choice level.", mode)
    return ChoiceLevel.from_parsed(data)
