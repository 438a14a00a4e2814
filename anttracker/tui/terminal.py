"""Console I/O for screens, built on rich."""
from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date, datetime
from typing import Any, TextIO

from rich.console import Console
from rich.prompt import InvalidResponse, Prompt

# Reserved input that aborts one level.
ABORT_TOKEN = "`"
ABORT_HINT = " Or press ` (backtick) to go back:"

DATE_FORMAT = "%Y/%m/%d"

Column = tuple[str, int]


class ValidatedPrompt(Prompt):
    """Prompt that re-asks until ``validate`` accepts the stripped answer."""

    def __init__(self, prompt: str = "", *, validate: Callable[[str], bool], **kwargs: Any):
        super().__init__(prompt, **kwargs)
        self.validate = validate

    def process_response(self, value: str) -> str:
        value = super().process_response(value)
        if not self.validate(value):
            raise InvalidResponse(self.validate_error_message)
        return value


def format_cell(value: Any, width: int) -> str:
    """Render one table cell, padded on the right to ``width``."""
    if value is None:
        text = ""
    elif isinstance(value, (datetime, date)):
        text = value.strftime(DATE_FORMAT)
    else:
        text = str(value)
    return text[:width].ljust(width)


def format_table(columns: Sequence[Column], rows: Sequence[Sequence[Any]]) -> list[str]:
    """Fixed-width lines: a ``# |Header|`` line, then ``NN|cell|cell|`` per row."""
    header = "|" + " |".join(name.ljust(width) for name, width in columns) + "|"
    lines = [f"# {header}"]
    for index, row in enumerate(rows, 1):
        cells = " |".join(format_cell(value, columns[col][1]) for col, value in enumerate(row))
        lines.append(f"{str(index).ljust(2)}|{cells}|")
    return lines


class Terminal:
    """The screens' only way to talk to the user.

    Output goes through a rich Console with markup disabled for record data;
    input goes through rich prompts, which re-ask until the answer is valid.
    """

    def __init__(self, console: Console | None = None, stream: TextIO | None = None):
        self.console = console or Console(highlight=False)
        self.stream = stream

    def print_line(self, text: str = "") -> None:
        self.console.print(text, markup=False, highlight=False)

    def print(self, text: str) -> None:
        self.console.print(text, end="", markup=False, highlight=False)

    def title(self, text: str) -> None:
        self.console.print(f"== {text} ==", style="bold cyan", markup=False, highlight=False)

    def prompt(
        self,
        message: str,
        choices: Sequence[str] | None = None,
        *,
        validate: Callable[[str], bool] | None = None,
    ) -> str:
        """Block until the user enters one of ``choices`` or a value ``validate`` accepts."""
        if choices is not None:
            return Prompt.ask(
                message,
                console=self.console,
                choices=list(choices),
                show_choices=False,
                stream=self.stream,
            )
        return ValidatedPrompt(
            message,
            console=self.console,
            validate=validate or (lambda _value: True),
        )(stream=self.stream)

    def display_table(self, columns: Sequence[Column], rows: Sequence[Sequence[Any]]) -> None:
        for line in format_table(columns, rows):
            self.print_line(line)
