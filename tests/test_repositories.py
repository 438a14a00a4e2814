"""Integration tests for the sqlite repository."""
from __future__ import annotations

from dataclasses import replace

import pytest

from anttracker.db import connect, init_db, is_empty, populate
from anttracker.filters import Condition, DescriptionContains, FilteredPage, FilterSet, PriorityEquals, StatusIn
from anttracker.models import Issue, Status
from anttracker.pager import BoundaryError
from anttracker.repositories import NotFoundError


def test_count_and_find_by_id(repo, make_issue):
    """Test issues are read back with joined product and release names."""
    issue_id = make_issue(description="Broken link", status="ASSESSED", priority=2)

    assert repo.count("issues") == 1
    issue = repo.find_by_id("issues", issue_id)
    assert isinstance(issue, Issue)
    assert issue.description == "Broken link"
    assert issue.status is Status.ASSESSED
    assert issue.product_name == "Product 1"
    assert issue.release_name == "1.0"
    assert repo.find_by_id("issues", 999) is None


def test_unknown_source(repo):
    """Test unknown sources are rejected."""
    with pytest.raises(ValueError):
        repo.count("widgets")


def test_fetch_page_uses_condition(repo, make_issue):
    """Test the page fetch honours the compiled filter condition."""
    for priority in (1, 2, 2, 3):
        make_issue(priority=priority)
    condition = FilterSet().add(PriorityEquals(2)).compile()

    assert repo.count("issues", condition) == 2
    found = repo.fetch_page("issues", condition, offset=0, limit=20)
    assert [i.priority for i in found] == [2, 2]


def test_forty_five_issues_page_as_20_20_5(repo, make_issue):
    """Test 45 matching issues page as 20, 20, 5 and stop."""
    for n in range(45):
        make_issue(description=f"Issue {n}")
    counter = lambda condition: repo.count("issues", condition)  # noqa: E731

    page = FilteredPage.start(counter)
    sizes = []
    while True:
        rows = repo.fetch_page("issues", page.condition, offset=page.pager.offset, limit=page.pager.limit)
        sizes.append(len(rows))
        if page.pager.is_last_page:
            break
        page = page.next()

    assert sizes == [20, 20, 5]
    with pytest.raises(BoundaryError):
        page.next()


def test_status_filter_against_storage(repo, make_issue):
    """Test a status-in predicate selects either status."""
    make_issue(status="CREATED")
    make_issue(status="DONE")
    make_issue(status="CANCELLED")
    condition = FilterSet().add(StatusIn((Status.DONE, Status.CANCELLED))).compile()
    assert {i.status for i in repo.find_all("issues", condition)} == {Status.DONE, Status.CANCELLED}


def test_update_by_id_persists_and_rereads(repo, make_issue):
    """Test the mutator result is written and a fresh record returned."""
    issue_id = make_issue(status="CREATED")

    updated = repo.update_by_id("issues", issue_id, lambda i: replace(i, status=Status.ASSESSED, priority=1))

    assert updated.status is Status.ASSESSED
    assert updated.priority == 1
    assert repo.find_by_id("issues", issue_id).status is Status.ASSESSED


def test_update_release_reassigns_join(repo, make_issue, catalog):
    """Test moving an issue to another release updates the joined name."""
    issue_id = make_issue(release="1.0")
    updated = repo.update_by_id("issues", issue_id, lambda i: replace(i, release_id=catalog["1.1"]))
    assert updated.release_name == "1.1"


def test_update_missing_raises(repo, catalog):
    """Test updating a missing record raises NotFoundError."""
    with pytest.raises(NotFoundError) as excinfo:
        repo.update_by_id("issues", 42, lambda i: i)
    assert excinfo.value.record_id == 42


def test_insert_applies_defaults(repo, catalog):
    """Test issues get Created status and a creation time by default."""
    issue = repo.insert("issues", {"description": "New one", "product_id": catalog["Product 1"], "priority": 4})
    assert issue.id is not None
    assert issue.status is Status.CREATED
    assert issue.created_at is not None
    assert issue.release_name is None


def test_insert_rejects_unknown_fields(repo):
    """Test fields that are not columns are refused."""
    with pytest.raises(ValueError):
        repo.insert("products", {"name": "X", "colour": "red"})


def test_requests_join_release_and_contact(repo, make_issue, catalog):
    """Test request rows carry release and contact details."""
    issue_id = make_issue()
    contact = repo.insert(
        "contacts",
        {"name": "Ada", "email": "ada@example.com", "phone": "5551234567", "department": "Eng"},
    )
    repo.insert("requests", {"issue_id": issue_id, "release_id": catalog["1.0"], "contact_id": contact.id})

    condition = Condition.where("q.issue_id = ?", issue_id)
    (request,) = repo.fetch_page("requests", condition, offset=0, limit=20)
    assert request.release_name == "1.0"
    assert request.contact_name == "Ada"
    assert request.contact_department == "Eng"


def test_lookup_helpers(repo, catalog):
    """Test product names and per-product releases."""
    assert repo.product_names() == ["Product 1", "Product 2"]
    assert repo.release_ids() == ["1.0", "1.1", "2.0"]
    assert [r.release_id for r in repo.releases_for_product(catalog["Product 1"])] == ["1.0", "1.1"]


def test_populate_sample_data(settings):
    """Test sample data covers 6 products x 6 releases x 21 issues."""
    conn = connect(settings.ANT_DB_PATH)
    try:
        init_db(conn)
        assert is_empty(conn)
        counts = populate(conn)
        assert counts == {"products": 6, "releases": 36, "issues": 756}
        assert not is_empty(conn)
        statuses = {row[0] for row in conn.execute("SELECT DISTINCT status FROM issues")}
        assert statuses == {s.value for s in Status}
    finally:
        conn.close()


@pytest.mark.parametrize("text", ["école", "ÉCOLE", "50%_off", "STRASSE"])
def test_description_search_agrees_with_storage(repo, make_issue, text):
    """Test the stored count and the in-memory test agree on non-ASCII and literal text."""
    make_issue(description="École crash")
    make_issue(description="50%_off banner")
    make_issue(description="500 off banner")
    make_issue(description="Straße sign")
    condition = FilterSet().add(DescriptionContains(text)).compile()

    stored = repo.find_all("issues", condition)
    in_memory = [i for i in repo.find_all("issues") if condition.matches(i)]

    assert repo.count("issues", condition) == len(in_memory) == 1
    assert stored == in_memory
