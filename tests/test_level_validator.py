from pathlib import Path

from branchtale.services.level_validator import Issue, format_issue, validate_game
from tests.helpers.fakes import write_level


def _codes(report) -> list[str]:
    return sorted(issue.code for issue in report.issues)


def test_valid_game_has_no_issues(tmp_path: Path) -> None:
    write_level(tmp_path / "start.level", "[OPTIONS]\nGo -> ./rooms/end.level\n")
    write_level(tmp_path / "rooms" / "end.level", "[DIRECTIVES]\ninput_mode: endgame\nresult: victory\n")

    report = validate_game(tmp_path)

    assert report.checked_files == 2
    assert report.issues == []
    assert report.ok


def test_reports_structural_problems(tmp_path: Path) -> None:
    write_level(
        tmp_path / "start.level",
        """[OPTIONS]
dup | One -> ./end.level
dup | Two -> ./missing.level
[OPTION_CONDITIONS]
option=ghost requires_flag=x
[OPTION_EFFECTS]
option=phantom add_flag=y
""",
    )
    write_level(tmp_path / "end.level", "[DIRECTIVES]\ninput_mode: endgame\nresult: draw\n")
    write_level(tmp_path / "empty.level", "[CONTENT]\nNo way out.\n")
    write_level(tmp_path / "riddle.level", "[DIRECTIVES]\ninput_mode: input\n")

    report = validate_game(tmp_path)

    assert report.checked_files == 4
    assert _codes(report) == [
        "DUPLICATE_ID",
        "INVALID_RESULT",
        "MISSING_TARGET",
        "NO_INPUT_RULES",
        "NO_OPTIONS",
        "UNKNOWN_CONDITION_ID",
        "UNKNOWN_EFFECT_ID",
        "UNREACHABLE_LEVEL",
        "UNREACHABLE_LEVEL",
    ]
    assert not report.ok


def test_input_rule_targets_are_checked(tmp_path: Path) -> None:
    write_level(
        tmp_path / "start.level",
        "[DIRECTIVES]\ninput_mode: input\n[INPUT_RULES]\nfriend -> ./gone.level\n",
    )

    report = validate_game(tmp_path)

    assert _codes(report) == ["MISSING_TARGET"]
    assert "input rule target" in report.issues[0].message


def test_missing_start_level(tmp_path: Path) -> None:
    write_level(tmp_path / "other.level", "[DIRECTIVES]\ninput_mode: endgame\nresult: victory\n")

    report = validate_game(tmp_path)

    assert _codes(report) == ["MISSING_START"]


def test_unknown_mode_is_warning_only(tmp_path: Path) -> None:
    write_level(tmp_path / "start.level", "[DIRECTIVES]\ninput_mode: puzzle\n[OPTIONS]\nStay -> ./start.level\n")

    report = validate_game(tmp_path)

    assert _codes(report) == ["UNKNOWN_MODE"]
    assert report.ok


def test_format_issue_includes_context() -> None:
    issue = Issue(severity="ERROR", code="NO_OPTIONS", message="Choice level has no options.", context={"level": "a.level"})

    assert format_issue(issue) == "[ERROR] NO_OPTIONS: Choice level has no options. (level=a.level)"
