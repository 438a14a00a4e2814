"""Top-level menu of the interactive session."""
from __future__ import annotations

from ...repositories import Repository
from ..components import MenuBuilder, Screen
from ..terminal import Terminal
from . import records
from .issues import issues_menu

BANNER = "AntTracker - issue tracking for your products"


def _banner(terminal: Terminal) -> None:
    terminal.print_line(BANNER)


def main_menu(repo: Repository) -> Screen:
    # Each entry opens its own level, so going back anywhere below lands here.
    return (
        MenuBuilder()
        .title("Main menu")
        .content(_banner)
        .submenu("View/Edit issues", lambda: issues_menu(repo))
        .submenu("New issue", lambda: records.new_issue(repo))
        .submenu("New request", lambda: records.new_request(repo))
        .submenu("New release", lambda: records.new_release(repo))
        .submenu("New contact", lambda: records.new_contact(repo))
        .submenu("New product", lambda: records.new_product(repo))
        .prompt("Please select a command.")
        .build()
    )
