import io
from pathlib import Path

import pytest

from branchtale.presentation.cli import app, config
from tests.helpers.fakes import write_level


@pytest.fixture(autouse=True)
def _isolated_home(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config.Path, "home", classmethod(lambda cls: tmp_path / "home"))
    monkeypatch.delenv("BRANCHTALE_DEBUG", raising=False)
    monkeypatch.delenv("BRANCHTALE_LOG_LEVEL", raising=False)


def _make_game(root: Path, name: str = "demo") -> Path:
    game = root / name
    write_level(
        game / "start.level",
        "[HEADER]\ntitle: Gate\n[CONTENT]\nA gate.\n[OPTIONS]\nWalk through -> ./end.level\n",
    )
    write_level(game / "end.level", "[HEADER]\ntitle: Beyond\n[DIRECTIVES]\ninput_mode: endgame\nresult: victory\n")
    return game


def _run(argv: list[str], stdin_text: str = "") -> tuple[int, str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    code = app.main(argv, stdin=io.StringIO(stdin_text), stdout=stdout, stderr=stderr)
    return code, stdout.getvalue(), stderr.getvalue()


def test_missing_games_dir_exits_with_error(tmp_path: Path) -> None:
    code, _, err = _run([str(tmp_path / "nowhere")])

    assert code == 1
    assert "Games directory does not exist" in err


def test_games_dir_without_start_level(tmp_path: Path) -> None:
    (tmp_path / "games" / "broken").mkdir(parents=True)

    code, _, err = _run([str(tmp_path / "games")])

    assert code == 1
    assert "No playable games found" in err


def test_play_game_to_victory(tmp_path: Path) -> None:
    _make_game(tmp_path / "games")

    code, out, err = _run([str(tmp_path / "games")], "1\n1\n")

    assert code == 0
    assert err == ""
    assert "Select a game:\n  [1] demo\n" in out
    assert "\nLaunching: demo\n" in out
    assert out.index("Gate") < out.index("Beyond") < out.index("[Victory]")


def test_exhausted_game_menu_is_runtime_error(tmp_path: Path) -> None:
    _make_game(tmp_path / "games")

    code, _, err = _run([str(tmp_path / "games")], "")

    assert code == 1
    assert err.startswith("Runtime error: ")


def test_exhausted_level_menu_ends_in_game_over(tmp_path: Path) -> None:
    _make_game(tmp_path / "games")

    code, out, _ = _run([str(tmp_path / "games")], "1\n")

    assert code == 0
    assert "[Victory]" not in out


def test_games_dir_from_user_config(tmp_path: Path) -> None:
    _make_game(tmp_path / "library", "quest")
    config.save_config({"games_dir": str(tmp_path / "library")})

    code, out, _ = _run([], "1\n1\n")

    assert code == 0
    assert "Launching: quest" in out


def test_validate_reports_issues(tmp_path: Path) -> None:
    _make_game(tmp_path / "games", "clean")
    broken = _make_game(tmp_path / "games", "zbroken")
    write_level(broken / "end.level", "[DIRECTIVES]\ninput_mode: endgame\n")

    code, out, _ = _run([str(tmp_path / "games"), "--validate"])

    assert code == 1
    assert "clean: checked 2 level file(s)" in out
    assert "[ERROR] INVALID_RESULT" in out


def test_validate_passes_clean_games(tmp_path: Path) -> None:
    _make_game(tmp_path / "games")

    code, out, _ = _run([str(tmp_path / "games"), "--validate"])

    assert code == 0
    assert "demo: checked 2 level file(s)\n" == out


def test_save_config_stores_defaults_and_exits(tmp_path: Path) -> None:
    _make_game(tmp_path / "shelf", "tale")

    code, out, _ = _run([str(tmp_path / "shelf"), "--theme", str(tmp_path / "night.theme"), "--save-config"])

    assert code == 0
    assert out == f"Saved config to {config.get_default_config_path()}\n"
    saved = config.load_config()
    assert saved == {"games_dir": str(tmp_path / "shelf"), "theme_file": str(tmp_path / "night.theme")}

    code, out, _ = _run([], "1\n1\n")
    assert code == 0
    assert "Launching: tale" in out
