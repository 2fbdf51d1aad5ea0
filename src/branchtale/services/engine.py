"""Engine loop that loads levels and follows their transitions."""
from __future__ import annotations

import logging
from typing import Callable

from branchtale.data.errors import LevelLoadError
from branchtale.data.level_parser import parse_level_file
from branchtale.data.paths import level_directory, resolve_next_level_path
from branchtale.domain.defs import ParsedLevel
from branchtale.domain.state import GameContext
from branchtale.services.levels import InputProvider, Level, Presenter, create_level

logger = logging.getLogger(__name__)


class Engine:
    """Drives a play session from the current level until it terminates."""

    def __init__(
        self,
        presenter: Presenter,
        input_provider: InputProvider,
        *,
        level_parser: Callable[[str], ParsedLevel] = parse_level_file,
        level_factory: Callable[[ParsedLevel], Level] = create_level,
    ) -> None:
        self._presenter = presenter
        self._input_provider = input_provider
        self._level_parser = level_parser
        self._level_factory = level_factory

    def run(self, context: GameContext) -> None:
        """Play levels until the context reaches game over or victory."""
        if not context.current_level_path:
            raise ValueError("GameContext.current_level_path must be set before Engine.run.")

        while not context.game_over and not context.victory:
            level_path = context.current_level_path
            context.current_directory = level_directory(level_path)
            logger.debug("Loading level %s", level_path)

            try:
                parsed = self._level_parser(level_path)
            except LevelLoadError as exc:
                self._fail(context, f"Failed to load level `{level_path}`: {exc}")
                break

            level = self._level_factory(parsed)
            level.render(context, self._presenter)
            level.execute(context, self._presenter, self._input_provider)

            if not context.has_next_level_request() and not context.is_finished:
                self._fail(context, f"Level did not request next level or terminate: {level_path}")
                break

            if not context.has_next_level_request():
                continue

            next_path = resolve_next_level_path(level_path, context.next_level_request or "")
            logger.debug("Transition %s -> %s", level_path, next_path)
            context.current_level_path = next_path
            context.clear_next_level_request()

        logger.debug(
            "Session finished at %s (victory=%s, game_over=%s)",
            context.current_level_path,
            context.victory,
            context.game_over,
        )

    def _fail(self, context: GameContext, message: str) -> None:
        logger.warning(message)
        self._presenter.render_structural_error(message)
        context.game_over = True
