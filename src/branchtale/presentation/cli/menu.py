"""Line-oriented menu and free-text input for the console."""
from __future__ import annotations

import sys
from typing import Sequence, TextIO

from branchtale.presentation.cli.theme import Theme
from branchtale.services.errors import InputExhaustedError


class ConsoleInputProvider:
    """Reads numbered menu selections and free text from a stream."""

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        theme: Theme | None = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._theme = theme or Theme()

    def _readline(self) -> str | None:
        line = self._stdin.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def _write(self, text: str) -> None:
        self._stdout.write(text)
        self._stdout.flush()

    def pick(self, labels: Sequence[str], prompt: str) -> int:
        """Show a numbered menu and return the zero-based index chosen."""
        if not labels:
            raise ValueError("pick requires at least one option.")
        theme = self._theme
        count = len(labels)
        self._write(theme.colorize(prompt, theme.prompt_color) + "\n")
        for number, label in enumerate(labels, start=1):
            self._write(f"  [{number}] {theme.colorize(label, theme.option_color)}\n")
        self._write(f"Choose an option [1-{count}]: ")

        while True:
            raw = self._readline()
            if raw is None:
                raise InputExhaustedError("Input stream closed before a selection was made.")
            index = _parse_index(raw, count)
            if index is not None:
                return index
            self._write(f"Invalid selection. Enter a number from 1 to {count}: ")

    def read_line(self, prompt: str) -> str | None:
        """Prompt for one line of free text; None once the stream is closed."""
        self._write("\n" + self._theme.colorize(prompt, self._theme.prompt_color) + " ")
        return self._readline()


def _parse_index(raw: str, count: int) -> int | None:
    value = raw.strip()
    if not (value.isascii() and value.isdigit()):
        return None
    number = int(value)
    if 1 <= number <= count:
        return number - 1
    return None
