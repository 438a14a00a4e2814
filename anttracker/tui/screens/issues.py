"""Issue browsing: filter menu, paged results and row selection."""
from __future__ import annotations

from functools import partial
from typing import Any

from ...filters import FilteredPage
from ...models import Issue
from ...repositories import Repository
from ..components import MenuBuilder, NavResult, RowSelectScreen, Screen, TableBuilder
from ..terminal import Terminal

ISSUE_COLUMNS = (
    ("ID", 7),
    ("Description", 30),
    ("Priority", 9),
    ("Status", 14),
    ("AntRel", 8),
    ("Created", 10),
)


def counter(repo: Repository):
    """Count function for issue conditions, as FilteredPage expects."""
    return partial(repo.count, "issues")


def start_page(repo: Repository) -> FilteredPage:
    return FilteredPage.start(counter(repo))


def issue_row(issue: Issue) -> list[Any]:
    return [
        issue.id,
        issue.description,
        issue.priority,
        issue.status.label,
        issue.release_name,
        issue.created_at,
    ]


def fetch_issues(repo: Repository, page: FilteredPage) -> list[Issue]:
    return repo.fetch_page(
        "issues",
        page.condition,
        offset=page.pager.offset,
        limit=page.pager.limit,
    )


def _render_filters(page: FilteredPage):
    def _content(terminal: Terminal) -> None:
        labels = page.filters.labels()
        if not labels:
            terminal.print_line("No filters selected.")
            return
        terminal.print_line("Active filters:")
        for label in labels:
            terminal.print_line(f"  - {label}")

    return _content


def issues_menu(repo: Repository, page: FilteredPage | None = None) -> Screen:
    """Filter selection menu; filters added here narrow the issue results."""
    from . import search

    page = page or start_page(repo)
    count = counter(repo)
    return (
        MenuBuilder()
        .title("VIEW/EDIT ISSUE")
        .content(_render_filters(page))
        .prompt("Please select search category.")
        .option("Search by description", lambda: search.by_description(repo, page))
        .option("Search by product", lambda: search.by_product(repo, page))
        .option("Search by anticipated release", lambda: search.by_anticipated_release(repo, page))
        .option("Search by status", lambda: search.by_status(repo, page))
        .option("Search by priority", lambda: search.by_priority(repo, page))
        .option("Search by days since creation", lambda: search.by_days_since(repo, page))
        .option("Display issues", lambda: issue_results(repo, page.refreshed(count)))
        .option("Clear filters", lambda: issues_menu(repo, page.cleared(count)))
        .build()
    )


def issue_results(repo: Repository, page: FilteredPage) -> Screen:
    """One page of issues matching the page's filters."""
    builder = (
        TableBuilder()
        .title("Search Results")
        .content(_render_filters(page))
        .columns(*ISSUE_COLUMNS)
        .rows(lambda pager: [issue_row(i) for i in fetch_issues(repo, page.with_pager(pager))])
        .pager(page.pager)
        .empty_message("No issues found.")
        .next_page(lambda pager: issue_results(repo, page.with_pager(pager)))
        .option("Select filter", lambda: issues_menu(repo, page))
    )
    if not page.pager.is_empty:
        builder.option("View issue", lambda: select_issue(repo, page))
    return builder.build()


def select_issue(repo: Repository, page: FilteredPage) -> NavResult:
    from .issue_view import issue_view

    return RowSelectScreen(
        records=tuple(fetch_issues(repo, page)),
        on_select=lambda issue: issue_view(repo, issue.id, page),
        title="View issue",
        prompt_message="Enter the row number of the issue you want to view.",
        empty_message="There are no issues matching the criteria.",
        on_empty=lambda: issues_menu(repo, page),
    )
