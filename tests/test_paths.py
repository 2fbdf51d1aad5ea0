import os

from branchtale.data import paths


def test_level_directory_is_parent_as_written() -> None:
    assert paths.level_directory("games/demo/start.level") == os.path.join("games", "demo")
    assert paths.level_directory("start.level") == ""


def test_default_locations() -> None:
    assert paths.get_default_games_path().name == "games"
    assert paths.get_default_theme_path().name == "default.theme"


def test_resolution_is_lexical(tmp_path) -> None:
    resolved = paths.resolve_next_level_path(str(tmp_path / "a" / "start.level"), "../b/nowhere.level")

    assert resolved == os.path.normpath(str(tmp_path / "b" / "nowhere.level"))
    assert not os.path.exists(resolved)
