"""Record pickers and entry forms for products, releases, contacts, issues and requests."""
from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ...filters import ALWAYS, Condition
from ...models import Contact, Issue, Product, Release, Status
from ...pager import Pager
from ...repositories import Repository
from ...validation import (
    CONTACT_NAME_MAX,
    DEPARTMENT_MAX,
    DESCRIPTION_MAX,
    EMAIL_MAX,
    EMAIL_MIN,
    PRIORITIES,
    PRODUCT_NAME_MAX,
    RELEASE_ID_MAX,
    is_contact_name,
    is_department,
    is_description,
    is_email,
    is_phone,
    is_product_name,
    is_release_id,
)
from ..components import MenuBuilder, NavResult, NoticeScreen, RowSelectScreen, Screen, TableBuilder
from ..terminal import ABORT_HINT, ABORT_TOKEN, Column, Terminal

logger = logging.getLogger(__name__)



@dataclass(frozen=True)
class PickerConfig:
    source: str
    title: str
    columns: tuple[Column, ...]
    row: Callable[[Any], list[Any]]
    prompt_message: str
    empty_message: str


PRODUCT_PICKER = PickerConfig(
    source="products",
    title="Select product",
    columns=(("Product", PRODUCT_NAME_MAX),),
    row=lambda p: [p.name],
    prompt_message="Please select product.",
    empty_message="No products found.",
)

RELEASE_PICKER = PickerConfig(
    source="releases",
    title="Select release",
    columns=(("Release", RELEASE_ID_MAX + 2), ("Product", PRODUCT_NAME_MAX), ("Released", 10)),
    row=lambda r: [r.release_id, r.product_name, r.release_date],
    prompt_message="Please select affected release.",
    empty_message="No releases found.",
)

ISSUE_PICKER = PickerConfig(
    source="issues",
    title="Select issue",
    columns=(("ID", 7), ("Description", DESCRIPTION_MAX), ("Status", 14)),
    row=lambda i: [i.id, i.description, i.status.label],
    prompt_message="Please select issue.",
    empty_message="No issues found.",
)

CONTACT_PICKER = PickerConfig(
    source="contacts",
    title="Select contact",
    columns=(("Name", CONTACT_NAME_MAX), ("Email", EMAIL_MAX), ("Department", DEPARTMENT_MAX)),
    row=lambda c: [c.name, c.email, c.department],
    prompt_message="Please select contact.",
    empty_message="No contacts found.",
)


def picker(
    repo: Repository,
    config: PickerConfig,
    on_select: Callable[[Any], NavResult],
    condition: Condition = ALWAYS,
    pager: Pager | None = None,
) -> Screen:
    """Paged table of records with a "Select" option handing one to ``on_select``."""
    pager = pager or Pager.first(repo.count(config.source, condition))

    def _records(p: Pager) -> list[Any]:
        if p.is_empty:
            return []
        return repo.fetch_page(config.source, condition, offset=p.offset, limit=p.limit)

    builder = (
        TableBuilder()
        .title(config.title)
        .columns(*config.columns)
        .rows(lambda p: [config.row(record) for record in _records(p)])
        .pager(pager)
        .empty_message(config.empty_message)
        .next_page(lambda p: picker(repo, config, on_select, condition, p))
        .prompt(config.prompt_message)
    )
    if not pager.is_empty:
        builder.option(
            "Select",
            lambda: RowSelectScreen(
                records=tuple(_records(pager)),
                on_select=on_select,
                title=config.title,
                empty_message=config.empty_message,
            ),
        )
    return builder.build()



@dataclass(frozen=True)
class FormField:
    name: str
    prompt: str
    validate: Callable[[str], bool] = lambda _value: True
    choices: Sequence[str] | None = None
    optional: bool = False


@dataclass(frozen=True)
class FormScreen:
    """Asks every field in turn, then offers to save or discard the answers.

    The abort token at any field abandons the whole form.
    """

    title: str
    fields: tuple[FormField, ...]
    on_save: Callable[[Mapping[str, str]], NavResult]
    preamble: tuple[str, ...] = ()

    def run(self, terminal: Terminal) -> NavResult:
        terminal.title(self.title)
        for line in self.preamble:
            terminal.print_line(line)

        values: dict[str, str] = {}
        for form_field in self.fields:
            answer = _ask(terminal, form_field)
            if answer is None:
                terminal.print_line()
                return None
            values[form_field.name] = answer
        terminal.print_line()
        return self._confirm(values)

    def _confirm(self, values: Mapping[str, str]) -> Screen:
        def _content(terminal: Terminal) -> None:
            for line in self.preamble:
                terminal.print_line(line)
            for name, value in values.items():
                terminal.print_line(f"{name.capitalize()}: {value}")

        return (
            MenuBuilder()
            .title(f"{self.title}: confirm")
            .content(_content)
            .option("Save", lambda: self.on_save(values))
            .option("Discard", lambda: None)
            .build()
        )


def _ask(terminal: Terminal, form_field: FormField) -> str | None:
    message = form_field.prompt
    if form_field.optional:
        message += " <Enter> to leave blank."
    message += ABORT_HINT
    if form_field.choices is not None:
        terminal.print_line("Options: " + ", ".join(form_field.choices))
        choices = list(form_field.choices) + [ABORT_TOKEN] + ([""] if form_field.optional else [])
        answer = terminal.prompt(message, choices)
    else:
        answer = terminal.prompt(
            message,
            validate=lambda text: text == ABORT_TOKEN
            or (form_field.optional and not text)
            or form_field.validate(text),
        )
    return None if answer == ABORT_TOKEN else answer


def save_record(repo: Repository, source: str, fields: Mapping[str, Any], describe: Callable[[Any], str]) -> NavResult:
    """Insert one record; either way, show the outcome and leave the form's level."""
    try:
        record = repo.insert(source, fields)
    except sqlite3.Error as exc:
        logger.exception("Storage error while inserting into %s", source)
        return NoticeScreen(f"Could not save: {exc}", lambda: None)
    return NoticeScreen(f"Saved {describe(record)}.", lambda: None)


def new_product(repo: Repository) -> Screen:
    existing = set(repo.product_names())
    return FormScreen(
        title="New product",
        fields=(
            FormField(
                "name",
                f"Please enter product name (1-{PRODUCT_NAME_MAX} characters, not already used).",
                validate=lambda v: is_product_name(v) and v not in existing,
            ),
        ),
        on_save=lambda values: save_record(
            repo, "products", {"name": values["name"]}, lambda p: f"product {p.name}"
        ),
    )


def release_form(repo: Repository, product: Product) -> Screen:
    taken = {r.release_id for r in repo.releases_for_product(product.id)}
    return FormScreen(
        title="New release",
        preamble=(f"Product: {product.name}",),
        fields=(
            FormField(
                "release",
                f"Please enter release id (1-{RELEASE_ID_MAX} characters).",
                validate=lambda v: is_release_id(v) and v not in taken,
            ),
        ),
        on_save=lambda values: save_record(
            repo,
            "releases",
            {"product_id": product.id, "release_id": values["release"]},
            lambda r: f"release {r.release_id} of {r.product_name}",
        ),
    )


def new_release(repo: Repository) -> Screen:
    return picker(repo, PRODUCT_PICKER, lambda product: release_form(repo, product))


def new_contact(repo: Repository) -> Screen:
    return FormScreen(
        title="New contact",
        fields=(
            FormField("name", f"Please enter contact name (1-{CONTACT_NAME_MAX} characters).", is_contact_name),
            FormField("email", f"Please enter contact email ({EMAIL_MIN}-{EMAIL_MAX} characters).", is_email),
            FormField("phone", "Please enter contact phone number (10 digits, or 11 starting with 1).", is_phone),
            FormField("department", f"Please enter contact department (1-{DEPARTMENT_MAX} characters).", is_department),
        ),
        on_save=lambda values: save_record(repo, "contacts", dict(values), lambda c: f"contact {c.name}"),
    )


def issue_form(repo: Repository, product: Product) -> Screen:
    releases = {r.release_id: r.id for r in repo.releases_for_product(product.id)}

    def _save(values: Mapping[str, str]) -> NavResult:
        fields = {
            "product_id": product.id,
            "description": values["description"],
            "priority": int(values["priority"]),
            "status": Status.CREATED,
            "release_id": releases.get(values["anticipated release"]),
        }
        return save_record(repo, "issues", fields, lambda i: f"issue #{i.id}")

    return FormScreen(
        title="New issue",
        preamble=(f"Product: {product.name}",),
        fields=(
            FormField("description", f"Please enter description (1-{DESCRIPTION_MAX} characters).", is_description),
            FormField("priority", "Please select priority.", choices=PRIORITIES),
            FormField("anticipated release", "Please select anticipated release.", choices=tuple(releases), optional=True),
        ),
        on_save=_save,
    )


def new_issue(repo: Repository) -> Screen:
    return picker(repo, PRODUCT_PICKER, lambda product: issue_form(repo, product))


def _confirm_request(repo: Repository, release: Release, issue: Issue, contact: Contact) -> Screen:
    def _content(terminal: Terminal) -> None:
        terminal.print_line(f"Product: {release.product_name}")
        terminal.print_line(f"Affected release: {release.release_id}")
        terminal.print_line(f"Issue: #{issue.id} {issue.description}")
        terminal.print_line(f"Contact: {contact.name} <{contact.email}>")

    fields = {"issue_id": issue.id, "release_id": release.id, "contact_id": contact.id}
    return (
        MenuBuilder()
        .title("New request: confirm")
        .content(_content)
        .option("Save", lambda: save_record(repo, "requests", fields, lambda q: f"request #{q.id}"))
        .option("Discard", lambda: None)
        .build()
    )


def new_request(repo: Repository) -> Screen:
    """Product, then affected release, then issue of that product, then contact."""

    def _pick_release(product: Product) -> Screen:
        return picker(
            repo,
            RELEASE_PICKER,
            lambda release: _pick_issue(product, release),
            Condition.where("r.product_id = ?", product.id),
        )

    def _pick_issue(product: Product, release: Release) -> Screen:
        return picker(
            repo,
            ISSUE_PICKER,
            lambda issue: _pick_contact(release, issue),
            Condition.where("i.product_id = ?", product.id),
        )

    def _pick_contact(release: Release, issue: Issue) -> Screen:
        return picker(repo, CONTACT_PICKER, lambda contact: _confirm_request(repo, release, issue, contact))

    return picker(repo, PRODUCT_PICKER, _pick_release)
