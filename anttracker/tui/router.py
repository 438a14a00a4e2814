"""Driving loop for the screen graph."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .components import Descend
from .navigator import Navigator

if TYPE_CHECKING:
    from .components import Screen
    from .terminal import Terminal

logger = logging.getLogger(__name__)

SEPARATOR = "/\\" * 40


class Router:
    """Runs screens one after another until the root level is left.

    The current screen is a local of ``run``; screens never drive each
    other. A screen returning None goes back one level, and the session
    ends when the root screen itself returns None.
    """

    def __init__(self, terminal: Terminal, nav: Navigator | None = None):
        self.terminal = terminal
        self.nav = nav or Navigator()

    def run(self, root: Screen) -> None:
        current: Screen | None = root
        while current is not None:
            self.terminal.print_line()
            self.terminal.print_line(SEPARATOR)
            if self.nav.depth():
                self.terminal.print_line(self.nav.breadcrumbs(current))
            self.terminal.print_line()

            try:
                result = current.run(self.terminal)
            except KeyboardInterrupt:
                if not self.nav.depth():
                    raise
                self.terminal.print_line()
                self.terminal.print_line("Interrupted. Returning to the main menu...")
                current = self.nav.home()
                continue

            if isinstance(result, Descend):
                self.nav.push(current)
                current = result.screen
            elif result is None:
                current = self.nav.pop()
            else:
                current = result

        logger.info("Session finished")
        self.terminal.print_line()
        self.terminal.print_line("Goodbye!")
