"""Reusable screen components for the TUI.

Every screen is an immutable description with a single ``run(terminal)``
method that renders itself, reads one validated choice and returns what
comes next:

- another screen, which the router runs next;
- ``Descend(screen)``, which also remembers the current screen so that
  backing out of ``screen``'s level returns here;
- ``None``, meaning "go back one level".

Options hold zero-argument factories, so the next screen (and any records
it shows) is built only when it is navigated to.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Union

from ..pager import BoundaryError, Pager
from .terminal import ABORT_HINT, ABORT_TOKEN, Column, Terminal


class Screen(Protocol):
    def run(self, terminal: Terminal) -> NavResult: ...


@dataclass(frozen=True)
class Descend:
    """Enter ``screen`` as a new level below the current screen."""

    screen: Screen


NavResult = Optional[Union[Screen, Descend]]
ScreenFactory = Callable[[], NavResult]
ContentFn = Callable[[Terminal], Any]
Option = tuple[str, ScreenFactory]


def _numbered(terminal: Terminal, labels: Sequence[str]) -> None:
    for index, label in enumerate(labels, 1):
        terminal.print(str(index).rjust(2))
        terminal.print_line(f". {label}")


def _choose(terminal: Terminal, message: str, count: int) -> int | None:
    """Prompt for ``1..count`` or the abort token; returns a 0-based index."""
    choices = [str(n) for n in range(1, count + 1)] + [ABORT_TOKEN]
    response = terminal.prompt((message + ABORT_HINT).strip(), choices)
    if response == ABORT_TOKEN:
        return None
    return int(response) - 1


@dataclass(frozen=True)
class MenuScreen:
    title: str | None = None
    options: tuple[Option, ...] = ()
    content: ContentFn | None = None
    prompt_message: str = ""

    def all_options(self) -> tuple[Option, ...]:
        return self.options

    def render_content(self, terminal: Terminal) -> None:
        if self.content is not None:
            self.content(terminal)

    def run(self, terminal: Terminal) -> NavResult:
        if self.title:
            terminal.title(self.title)
        self.render_content(terminal)
        terminal.print_line()

        options = self.all_options()
        _numbered(terminal, [label for label, _ in options])
        terminal.print_line()

        index = _choose(terminal, self.prompt_message, len(options))
        if index is None:
            return None
        return options[index][1]()


@dataclass(frozen=True)
class TableConfig:
    columns: tuple[Column, ...] = ()
    rows: Callable[[Pager], Sequence[Sequence[Any]]] = field(default=lambda _pager: [])
    pager: Pager = field(default_factory=Pager)
    empty_message: str = ""
    next_page: Callable[[Pager], NavResult] | None = None


@dataclass(frozen=True)
class TableScreen(MenuScreen):
    """A menu showing one page of rows, with "Next page" and "Print" first."""

    table: TableConfig = field(default_factory=TableConfig)

    def all_options(self) -> tuple[Option, ...]:
        return (("Next page", self._next_page), ("Print", self._print)) + self.options

    def fetch(self) -> Sequence[Sequence[Any]]:
        # An empty result set is known from the count; skip the page query.
        if self.table.pager.is_empty:
            return []
        return self.table.rows(self.table.pager)

    def render_content(self, terminal: Terminal) -> None:
        super().render_content(terminal)
        self._render_page(terminal)

    def _render_page(self, terminal: Terminal) -> None:
        rows = self.fetch()
        if not rows:
            terminal.print_line(self.table.empty_message)
            return
        terminal.display_table(self.table.columns, rows)
        terminal.print_line(self.table.pager.describe())

    def _next_page(self) -> NavResult:
        try:
            pager = self.table.pager.advance()
        except BoundaryError:
            return NoticeScreen("No more pages.", lambda: self)
        if self.table.next_page is None:
            return NoticeScreen("No more pages.", lambda: self)
        return self.table.next_page(pager)

    def _print(self) -> NavResult:
        def _printout(terminal: Terminal) -> None:
            terminal.title(f"Print: {self.title or 'Table'}")
            self._render_page(terminal)

        return NoticeScreen(_printout, lambda: self)


@dataclass(frozen=True)
class NoticeScreen:
    """Shows a message, then moves on to ``then()`` without asking anything."""

    message: str | ContentFn
    then: ScreenFactory
    title: str | None = None

    def run(self, terminal: Terminal) -> NavResult:
        if callable(self.message):
            self.message(terminal)
        else:
            terminal.print_line(self.message)
        return self.then()


@dataclass(frozen=True)
class RowSelectScreen:
    """Asks for a row number of the page just shown and hands over that record."""

    records: tuple[Any, ...]
    on_select: Callable[[Any], NavResult]
    title: str | None = "Select row"
    prompt_message: str = "Enter the row number."
    empty_message: str = "There is nothing to select."
    on_empty: ScreenFactory = lambda: None

    def run(self, terminal: Terminal) -> NavResult:
        if self.title:
            terminal.title(self.title)
        if not self.records:
            terminal.print_line(self.empty_message)
            return self.on_empty()
        index = _choose(terminal, self.prompt_message, len(self.records))
        terminal.print_line()
        if index is None:
            return None
        return self.on_select(self.records[index])


class MenuBuilder:
    """Collects menu configuration through ordered calls, then ``build()``s it.

    Usage:
        MenuBuilder().title("Main menu").option("Issues", issues_menu).build()
    """

    def __init__(self) -> None:
        self._title: str | None = None
        self._options: list[Option] = []
        self._content: ContentFn | None = None
        self._prompt = ""

    def title(self, text: str) -> MenuBuilder:
        self._title = text
        return self

    def option(self, label: str, factory: ScreenFactory) -> MenuBuilder:
        self._options.append((label, factory))
        return self

    def submenu(self, label: str, factory: Callable[[], Screen]) -> MenuBuilder:
        """Like ``option`` but opens a new level: aborting inside it returns here."""
        return self.option(label, lambda: Descend(factory()))

    def content(self, fn: ContentFn) -> MenuBuilder:
        self._content = fn
        return self

    def prompt(self, message: str) -> MenuBuilder:
        self._prompt = message
        return self

    def build(self) -> MenuScreen:
        return MenuScreen(
            title=self._title,
            options=tuple(self._options),
            content=self._content,
            prompt_message=self._prompt,
        )


class TableBuilder(MenuBuilder):
    def __init__(self) -> None:
        super().__init__()
        self._columns: tuple[Column, ...] = ()
        self._rows: Callable[[Pager], Sequence[Sequence[Any]]] = lambda _pager: []
        self._pager = Pager()
        self._empty_message = ""
        self._next_page: Callable[[Pager], NavResult] | None = None

    def columns(self, *columns: Column) -> TableBuilder:
        self._columns = tuple(columns)
        return self

    def rows(self, fn: Callable[[Pager], Sequence[Sequence[Any]]]) -> TableBuilder:
        self._rows = fn
        return self

    def pager(self, pager: Pager) -> TableBuilder:
        self._pager = pager
        return self

    def empty_message(self, message: str) -> TableBuilder:
        self._empty_message = message
        return self

    def next_page(self, fn: Callable[[Pager], NavResult]) -> TableBuilder:
        self._next_page = fn
        return self

    def build(self) -> TableScreen:
        return TableScreen(
            title=self._title,
            options=tuple(self._options),
            content=self._content,
            prompt_message=self._prompt,
            table=TableConfig(
                columns=self._columns,
                rows=self._rows,
                pager=self._pager,
                empty_message=self._empty_message,
                next_page=self._next_page,
            ),
        )
