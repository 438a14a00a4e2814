"""Search-by menus: each asks for one filter value and narrows the results."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ...filters import (
    AnticipatedReleaseEquals,
    CreatedWithinDays,
    DescriptionContains,
    FilteredPage,
    IssueFilter,
    PriorityEquals,
    ProductEquals,
    StatusIn,
    parse_statuses,
)
from ...models import Status
from ...repositories import Repository
from ...validation import DESCRIPTION_MAX, PRIORITIES, is_description, parse_days
from ..components import NavResult
from ..terminal import Terminal
from .issues import counter, issue_results, issues_menu


@dataclass(frozen=True)
class SearchByScreen:
    """Asks for a value to filter issues by, or blank to go back.

    With ``options`` the answer must be one of them; otherwise it must be
    text that ``create_filter`` turns into a filter. Anything else is asked
    again.
    """

    repo: Repository
    page: FilteredPage
    target: str
    create_filter: Callable[[str], IssueFilter | None]
    options: tuple[str, ...] = ()
    prompt_message: str = ""

    @property
    def title(self) -> str:
        return f"Search by {self.target}"

    def message(self) -> str:
        end = "or leave it empty to go back to the issues menu"
        if not self.prompt_message:
            return f"Please enter a {self.target} to search for {end}"
        return f"{self.prompt_message} {end}"

    def run(self, terminal: Terminal) -> NavResult:
        terminal.title(self.title)
        if self.options:
            terminal.print_line("Options: " + ", ".join(self.options))
            answer = terminal.prompt(self.message(), list(self.options) + [""])
        else:
            answer = terminal.prompt(
                self.message(),
                validate=lambda text: text == "" or self.create_filter(text) is not None,
            )
        terminal.print_line()

        flt = self.create_filter(answer) if answer.strip() else None
        if flt is None:
            terminal.print_line("Going back to the issues menu...")
            return issues_menu(self.repo, self.page)
        return issue_results(self.repo, self.page.add_filter(flt, counter(self.repo)))


def _description_filter(text: str) -> IssueFilter | None:
    return DescriptionContains(text) if is_description(text) else None


def _status_filter(text: str) -> IssueFilter | None:
    statuses = parse_statuses(text)
    return StatusIn(statuses) if statuses else None


def _days_filter(text: str) -> IssueFilter | None:
    days = parse_days(text)
    return CreatedWithinDays(days) if days is not None else None


def by_description(repo: Repository, page: FilteredPage) -> SearchByScreen:
    return SearchByScreen(
        repo,
        page,
        f"description (1-{DESCRIPTION_MAX} characters)",
        _description_filter,
    )


def by_product(repo: Repository, page: FilteredPage) -> SearchByScreen:
    return SearchByScreen(repo, page, "product", ProductEquals, options=tuple(repo.product_names()))


def by_anticipated_release(repo: Repository, page: FilteredPage) -> SearchByScreen:
    return SearchByScreen(
        repo,
        page,
        "anticipated release",
        AnticipatedReleaseEquals,
        options=tuple(repo.release_ids()),
    )


def by_status(repo: Repository, page: FilteredPage) -> SearchByScreen:
    names = ", ".join(s.label for s in Status)
    return SearchByScreen(
        repo,
        page,
        "statuses",
        _status_filter,
        prompt_message=f"Enter all the statuses to search for separated by commas ({names})",
    )


def by_priority(repo: Repository, page: FilteredPage) -> SearchByScreen:
    return SearchByScreen(
        repo,
        page,
        "priority",
        lambda text: PriorityEquals(int(text)),
        options=PRIORITIES,
    )


def by_days_since(repo: Repository, page: FilteredPage) -> SearchByScreen:
    return SearchByScreen(
        repo,
        page,
        "created within the last n days",
        _days_filter,
        prompt_message="Enter how many days back to search for (non-negative number)",
    )
