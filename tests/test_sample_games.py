from pathlib import Path

from branchtale.domain.state import GameContext
from branchtale.services import Engine, discover_games, validate_game
from tests.helpers.fakes import RecordingPresenter, ScriptedInputProvider

_GAMES_ROOT = Path(__file__).resolve().parents[1] / "games"


def test_bundled_games_validate_cleanly() -> None:
    games = discover_games(_GAMES_ROOT)
    assert [game.name for game in games] == ["lantern"]
    for game in games:
        report = validate_game(game.root)
        assert report.issues == [], report.issues


def test_lantern_walkthrough_reaches_victory() -> None:
    game = discover_games(_GAMES_ROOT)[0]
    context = GameContext(current_directory=str(game.root), current_level_path=str(game.start_level))
    presenter = RecordingPresenter()
    provider = ScriptedInputProvider(
        picks=["Climb down the cellar hatch", "Unlock the front door"],
        lines=["who are you?", "a friend of the house"],
    )

    Engine(presenter, provider).run(context)

    assert context.victory
    assert context.get_value("key") == "brass"
    assert presenter.titles == ["The Lantern House", "Cellar Stairs", "The Lantern House", "The Warm Hall"]
    assert presenter.notices == ["The voice waits in silence."]
    assert provider.offered[1] == ["Unlock the front door", "Walk back into the storm"]
    assert presenter.errors == []
