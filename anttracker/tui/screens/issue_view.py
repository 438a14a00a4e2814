"""Single-issue view, its field editors and its requests."""
from __future__ import annotations

from dataclasses import replace
from typing import Any

from ...filters import Condition, FilteredPage
from ...models import Issue, Request, Status, is_terminal, next_statuses
from ...pager import Pager
from ...repositories import NotFoundError, Repository
from ...validation import DESCRIPTION_MAX, PRIORITIES, is_description
from ..components import MenuBuilder, NoticeScreen, Screen, TableBuilder
from ..editor import Attribute, Editor, edit_attribute
from ..terminal import DATE_FORMAT, Terminal
from .issues import counter, issue_results

DESCRIPTION = Attribute(
    name="description",
    get=lambda issue: issue.description,
    set=lambda issue, value: replace(issue, description=value),
    validate=is_description,
    prompt=f"Please enter description (1-{DESCRIPTION_MAX} characters).",
)

PRIORITY = Attribute(
    name="priority",
    get=lambda issue: issue.priority,
    set=lambda issue, value: replace(issue, priority=value),
    parse=int,
    choices=lambda _issue: list(PRIORITIES),
)

STATUS = Attribute(
    name="status",
    get=lambda issue: issue.status,
    set=lambda issue, value: replace(issue, status=value),
    parse=Status.parse,
    choices=lambda issue: [s.label for s in next_statuses(issue.status)],
)


def release_attribute(repo: Repository) -> Attribute:
    """Anticipated release; legal values are the releases of the issue's product."""

    def _releases(issue: Issue) -> dict[str, int]:
        return {r.release_id: r.id for r in repo.releases_for_product(issue.product_id)}

    def _set(issue: Issue, release_id: str) -> Issue:
        releases = _releases(issue)
        if release_id not in releases:
            raise NotFoundError("releases", release_id)
        return replace(issue, release_id=releases[release_id])

    return Attribute(
        name="anticipated release",
        get=lambda issue: issue.release_name,
        set=_set,
        choices=lambda issue: list(_releases(issue)),
    )


def _created(issue: Issue) -> str:
    return issue.created_at.strftime(DATE_FORMAT) if issue.created_at else ""


def print_issue_summary(terminal: Terminal, issue: Issue) -> None:
    terminal.title("Summary")
    terminal.print_line(f"Description: {issue.description}")
    terminal.print_line(f"Product: {issue.product_name}")
    terminal.print_line(f"Priority: {issue.priority}")
    terminal.print_line(f"Status: {issue.status.label}")
    terminal.print_line(f"AntRel: {issue.release_name or ''}")
    terminal.print_line(f"Created: {_created(issue)}")
    terminal.print_line()


def issue_editor(repo: Repository, page: FilteredPage) -> Editor:
    return Editor(
        repo=repo,
        source="issues",
        view=lambda issue_id: issue_view(repo, issue_id, page),
        on_missing=lambda: issue_results(repo, page.refreshed(counter(repo))),
        summary=print_issue_summary,
    )


def issue_view(repo: Repository, issue_id: int, page: FilteredPage) -> Screen:
    """Fields of one issue, freshly read from storage; pick one to edit it."""
    issue = repo.find_by_id("issues", issue_id)
    back_to_results = lambda: issue_results(repo, page.refreshed(counter(repo)))  # noqa: E731
    if issue is None:
        return NoticeScreen(f"Issue #{issue_id} no longer exists.", back_to_results)

    editor = issue_editor(repo, page)
    locked = " (not editable)" if is_terminal(issue.status) else ""
    reopen = lambda: issue_view(repo, issue.id, page)  # noqa: E731
    return (
        MenuBuilder()
        .title(f"Issue #{issue.id}")
        .content(lambda t: t.print_line(f"Product: {issue.product_name}"))
        .option(f"Description: {issue.description}", lambda: edit_attribute(editor, DESCRIPTION, issue))
        .option(f"Priority: {issue.priority}", lambda: edit_attribute(editor, PRIORITY, issue))
        .option(f"Status: {issue.status.label}{locked}", lambda: edit_attribute(editor, STATUS, issue))
        .option(
            f"AntRel: {issue.release_name or ''}",
            lambda: edit_attribute(editor, release_attribute(repo), issue),
        )
        .option(f"Created: {_created(issue)} (not editable)", reopen)
        .option("Requests", lambda: issue_requests(repo, issue.id, page))
        .option("Print", lambda: NoticeScreen(lambda t: print_issue_summary(t, issue), reopen))
        .option("Back to results", back_to_results)
        .prompt("Enter 1, 2, 3, or 4 to edit the respective fields.")
        .build()
    )


REQUEST_COLUMNS = (
    ("Affected Release", 17),
    ("Date requested", 14),
    ("Name", 32),
    ("Email", 24),
    ("Department", 12),
)


def request_row(request: Request) -> list[Any]:
    return [
        request.release_name,
        request.requested_at,
        request.contact_name,
        request.contact_email,
        request.contact_department,
    ]


def issue_requests(repo: Repository, issue_id: int, page: FilteredPage, pager: Pager | None = None) -> Screen:
    """Paged requests filed against one issue."""
    condition = Condition.where("q.issue_id = ?", issue_id)
    pager = pager or Pager.first(repo.count("requests", condition))
    return (
        TableBuilder()
        .title(f"Requests for issue #{issue_id}")
        .columns(*REQUEST_COLUMNS)
        .rows(
            lambda p: [
                request_row(r)
                for r in repo.fetch_page("requests", condition, offset=p.offset, limit=p.limit)
            ]
        )
        .pager(pager)
        .empty_message("No requests found.")
        .next_page(lambda p: issue_requests(repo, issue_id, page, p))
        .option("Back to issue", lambda: issue_view(repo, issue_id, page))
        .prompt("Press 1 to go to the next page. 2 to print.")
        .build()
    )
