"""Generic one-field record editor.

The same flow serves every editable field; what differs per field is an
``Attribute`` record:

- ``choices(record)``: the legal new values given the record's current
  state, or None/empty when the field cannot be changed right now;
- ``validate(text)``: accepted free text, for fields without choices;
- ``parse(text)`` and ``set(record, value)``: how the answer becomes the
  mutated record that storage persists.
"""
from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from ..repositories import NotFoundError, Repository
from .components import MenuBuilder, NavResult, NoticeScreen, Screen
from .terminal import ABORT_HINT, ABORT_TOKEN, Terminal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attribute:
    name: str
    get: Callable[[Any], Any]
    set: Callable[[Any, Any], Any]
    parse: Callable[[str], Any] = str
    choices: Callable[[Any], Sequence[str] | None] | None = None
    validate: Callable[[str], bool] | None = None
    prompt: str | None = None

    def show(self, record: Any) -> str:
        value = self.get(record)
        label = getattr(value, "label", None)
        return "" if value is None else str(label if label is not None else value)


@dataclass(frozen=True)
class Editor:
    """Where an edit reads from, writes to, and returns to."""

    repo: Repository
    source: str
    view: Callable[[int], Screen]
    on_missing: Callable[[], NavResult]
    summary: Callable[[Terminal, Any], None] | None = None


def edit_attribute(editor: Editor, attribute: Attribute, record: Any) -> NavResult:
    """Enter the editor for one field of ``record``.

    Fields whose legal values are currently empty are a no-op back to the
    record's view.
    """
    options: Sequence[str] | None = None
    if attribute.choices is not None:
        options = attribute.choices(record)
        if not options:
            return editor.view(record.id)
    return AskNewValue(editor, attribute, record, tuple(options or ()))


@dataclass(frozen=True)
class AskNewValue:
    editor: Editor
    attribute: Attribute
    record: Any
    options: tuple[str, ...] = ()

    @property
    def title(self) -> str:
        return f"Edit {self.attribute.name}"

    def run(self, terminal: Terminal) -> NavResult:
        message = (self.attribute.prompt or f"Please enter {self.attribute.name}.") + ABORT_HINT
        if self.options:
            terminal.print_line("Options: " + ", ".join(self.options))
            answer = terminal.prompt(message, list(self.options) + [ABORT_TOKEN])
        else:
            validate = self.attribute.validate or (lambda _text: True)
            answer = terminal.prompt(message, validate=lambda text: text == ABORT_TOKEN or validate(text))
        terminal.print_line()

        if answer == ABORT_TOKEN:
            return self.editor.view(self.record.id)
        return self._confirm(answer)

    def _confirm(self, answer: str) -> Screen:
        editor, attribute, record = self.editor, self.attribute, self.record

        def _content(terminal: Terminal) -> None:
            if editor.summary is not None:
                editor.summary(terminal, record)
            terminal.title(f"Update: {attribute.name}")
            terminal.print_line(f"OLD: {attribute.show(record)}")
            terminal.print_line(f"NEW: {answer}")

        return (
            MenuBuilder()
            .content(_content)
            .option("Save", lambda: save_attribute(editor, attribute, record.id, answer))
            .option("Back", lambda: editor.view(record.id))
            .build()
        )


def save_attribute(editor: Editor, attribute: Attribute, record_id: int, answer: str) -> NavResult:
    """Persist the new value and return a view built from the stored record."""
    value = attribute.parse(answer)
    try:
        editor.repo.update_by_id(editor.source, record_id, lambda current: attribute.set(current, value))
    except NotFoundError as exc:
        logger.warning("Edit of %s failed: %s", attribute.name, exc)
        if exc.source != editor.source:
            # The record is still there; the value it pointed to is not.
            return NoticeScreen(f"Cannot save: {exc}.", lambda: editor.view(record_id))
        return NoticeScreen(f"Cannot save: {exc}.", editor.on_missing)
    except sqlite3.Error as exc:
        logger.exception("Storage error while saving %s of %s #%s", attribute.name, editor.source, record_id)
        return NoticeScreen(f"Could not save {attribute.name}: {exc}", lambda: editor.view(record_id))
    return editor.view(record_id)
