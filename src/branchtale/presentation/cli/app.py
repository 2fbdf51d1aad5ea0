"""Console entry point: pick a game, then play it level by level."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Sequence, TextIO

from branchtale.domain.state import GameContext
from branchtale.presentation.cli.config import (
    configure_logging,
    get_default_config_path,
    load_config,
    save_config,
)
from branchtale.presentation.cli.menu import ConsoleInputProvider
from branchtale.presentation.cli.render import ConsolePresenter
from branchtale.presentation.cli.theme import Theme, color_enabled_for_terminal, load_theme
from branchtale.services import (
    Engine,
    GameEntry,
    InputExhaustedError,
    discover_games,
    format_issue,
    validate_game,
)

logger = logging.getLogger(__name__)

_GAME_MENU_PROMPT = "Select a game:"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="branchtale",
        description="Play branching narrative games written as .level files.",
    )
    parser.add_argument("games_dir", nargs="?", default=None, help="Directory holding one folder per game.")
    parser.add_argument("--theme", dest="theme_file", default=None, help="Theme file with key = value colours.")
    parser.add_argument("--validate", action="store_true", help="Validate every game instead of playing.")
    parser.add_argument("--log-level", default=None, help="Logging level (default WARNING).")
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Store the games directory and theme file as user defaults, then exit.",
    )
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run the CLI and return a process exit status."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr

    args = build_arg_parser().parse_args(argv)
    configure_logging(args.log_level)
    config = load_config()
    games_root = Path(args.games_dir or config["games_dir"])
    theme_file = Path(args.theme_file or config["theme_file"])

    if args.save_config:
        save_config({"games_dir": str(games_root), "theme_file": str(theme_file)})
        print(f"Saved config to {get_default_config_path()}", file=stdout)
        return 0

    if not games_root.is_dir():
        print(f"Games directory does not exist or is not a directory: {games_root}", file=stderr)
        return 1
    games = discover_games(games_root)
    if not games:
        print(f"No playable games found in: {games_root} (each game must contain start.level)", file=stderr)
        return 1

    if args.validate:
        return _validate_games(games, stdout)

    theme = _load_console_theme(theme_file, stdout)
    input_provider = ConsoleInputProvider(stdin=stdin, stdout=stdout, theme=theme)
    presenter = ConsolePresenter(theme=theme, stream=stdout)

    try:
        index = input_provider.pick([game.name for game in games], _GAME_MENU_PROMPT)
    except InputExhaustedError as exc:
        print(f"Runtime error: {exc}", file=stderr)
        return 1

    game = games[index]
    print(f"\nLaunching: {game.name}", file=stdout)
    context = play_game(game, presenter, input_provider)
    logger.info("Game %s ended (victory=%s)", game.name, context.victory)
    return 0


def play_game(game: GameEntry, presenter: ConsolePresenter, input_provider: ConsoleInputProvider) -> GameContext:
    """Run one session of ``game`` from its start level."""
    context = GameContext(
        current_directory=str(game.root),
        current_level_path=str(game.start_level),
    )
    Engine(presenter, input_provider).run(context)
    return context


def _load_console_theme(theme_file: Path, stdout: TextIO) -> Theme:
    theme = load_theme(theme_file)
    if theme.use_color and not color_enabled_for_terminal(stdout):
        theme = replace(theme, use_color=False)
    return theme


def _validate_games(games: List[GameEntry], stdout: TextIO) -> int:
    failed = False
    for game in games:
        report = validate_game(game.root)
        print(f"{game.name}: checked {report.checked_files} level file(s)", file=stdout)
        for issue in report.issues:
            print(f"  {format_issue(issue)}", file=stdout)
        if report.errors:
            failed = True
    return 1 if failed else 0
