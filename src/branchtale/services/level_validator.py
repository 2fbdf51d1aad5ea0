"""Static validation of every level file in a game directory."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence, Set

from branchtale.data.errors import LevelLoadError
from branchtale.data.level_parser import parse_level_file
from branchtale.data.paths import START_LEVEL_NAME, resolve_next_level_path
from branchtale.domain.defs import ParsedLevel, resolve_option_id, resolve_rule_id

Severity = str

_KNOWN_MODES = {"choice", "input", "endgame"}
_END_RESULTS = {"victory", "game_over"}


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


@dataclass(slots=True)
class ValidationReport:
    """Result of validating one game directory."""

    checked_files: int = 0
    issues: List[Issue] = field(default_factory=list)

    @property
    def errors(self) -> List[Issue]:
        return [issue for issue in self.issues if issue.severity == "ERROR"]

    @property
    def ok(self) -> bool:
        return not self.errors


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def validate_game(game_root: Path | str) -> ValidationReport:
    """Re-parse every ``*.level`` file under ``game_root`` and report problems.

    Validation never executes a level and never touches game state. Targets
    are resolved exactly as the engine resolves them and checked on disk.
    """
    root = Path(game_root)
    report = ValidationReport()
    level_paths = sorted(os.path.normpath(str(path)) for path in root.rglob("*.level") if path.is_file())
    targets_by_level: Dict[str, List[str]] = {}

    for level_path in level_paths:
        report.checked_files += 1
        try:
            data = parse_level_file(level_path)
        except LevelLoadError as exc:
            _add(report, "ERROR", "PARSE_FAILURE", f"Parse failure: {exc}", level_path)
            continue
        targets_by_level[level_path] = _validate_level(level_path, data, report)

    start_path = os.path.normpath(str(root / START_LEVEL_NAME))
    if not os.path.isfile(start_path):
        _add(report, "ERROR", "MISSING_START", f"Game root must contain {START_LEVEL_NAME}.", start_path)
    else:
        _validate_reachability(start_path, targets_by_level, report)
    return report


def _add(report: ValidationReport, severity: Severity, code: str, message: str, level_path: str, **extra: str) -> None:
    context = {"level": level_path}
    context.update(extra)
    report.issues.append(Issue(severity=severity, code=code, message=message, context=context))


def _validate_level(level_path: str, data: ParsedLevel, report: ValidationReport) -> List[str]:
    mode = data.directives.get("input_mode", "choice")
    if mode not in _KNOWN_MODES:
        _add(report, "WARN", "UNKNOWN_MODE", f"Unknown input_mode `{mode}`; played as a choice level.", level_path)
        mode = "choice"

    if mode == "endgame":
        if data.directives.get("result") not in _END_RESULTS:
            _add(
                report,
                "ERROR",
                "INVALID_RESULT",
                "Endgame level must define `result: victory|game_over`.",
                level_path,
            )
        return []

    if mode == "input":
        if not data.input_rules:
            _add(report, "ERROR", "NO_INPUT_RULES", "Input level has no input rules.", level_path)
            return []
        ids = [resolve_rule_id(rule, index) for index, rule in enumerate(data.input_rules)]
        targets = [rule.target for rule in data.input_rules]
        kind = "input rule"
    else:
        if not data.options:
            _add(report, "ERROR", "NO_OPTIONS", "Choice level has no options.", level_path)
            return []
        ids = [resolve_option_id(option, index) for index, option in enumerate(data.options)]
        targets = [option.target for option in data.options]
        kind = "option"

    _validate_ids(level_path, kind, ids, report)
    resolved_targets: List[str] = []
    for target in targets:
        resolved = resolve_next_level_path(level_path, target)
        resolved_targets.append(resolved)
        if not os.path.isfile(resolved):
            _add(report, "ERROR", "MISSING_TARGET", f"Missing {kind} target `{target}`.", level_path, resolved=resolved)

    known = set(ids)
    for condition in data.option_conditions:
        if condition.option_id not in known:
            _add(
                report,
                "ERROR",
                "UNKNOWN_CONDITION_ID",
                f"OPTION_CONDITIONS references unknown option id `{condition.option_id}`.",
                level_path,
            )
    for effect in data.option_effects:
        if effect.option_id not in known:
            _add(
                report,
                "ERROR",
                "UNKNOWN_EFFECT_ID",
                f"OPTION_EFFECTS references unknown option id `{effect.option_id}`.",
                level_path,
            )
    return resolved_targets


def _validate_ids(level_path: str, kind: str, ids: Sequence[str], report: ValidationReport) -> None:
    seen: Set[str] = set()
    for item_id in ids:
        if item_id in seen:
            _add(report, "ERROR", "DUPLICATE_ID", f"Duplicate {kind} id: `{item_id}`.", level_path)
        seen.add(item_id)


def _validate_reachability(
    start_path: str, targets_by_level: Dict[str, List[str]], report: ValidationReport
) -> None:
    reachable: Set[str] = set()
    pending = [start_path]
    while pending:
        current = pending.pop()
        if current in reachable:
            continue
        reachable.add(current)
        pending.extend(target for target in targets_by_level.get(current, []) if target not in reachable)

    for level_path in sorted(targets_by_level):
        if level_path not in reachable:
            _add(report, "WARN", "UNREACHABLE_LEVEL", "Level is not reachable from the start level.", level_path)
