"""Unit tests for the Pager cursor."""
from __future__ import annotations

import pytest

from anttracker.pager import PAGE_LIMIT, BoundaryError, Pager


@pytest.mark.parametrize(
    "total, pages",
    [(0, 0), (1, 1), (19, 1), (20, 1), (21, 2), (40, 2), (45, 3)],
)
def test_page_count(total, pages):
    """Test page count is ceil(total / 20) with no trailing empty page."""
    assert Pager.first(total).page_count == pages


def test_first_page_defaults():
    """Test a new pager starts at offset 0 with the fixed limit."""
    pager = Pager.first(45)
    assert pager.offset == 0
    assert pager.limit == PAGE_LIMIT == 20
    assert pager.page_index == 0
    assert not pager.is_last_page


def test_walk_45_records():
    """Test 45 records page as 20, 20, 5 and then refuse to advance."""
    pager = Pager.first(45)
    seen = []
    while True:
        seen.append((pager.offset, pager.remaining()))
        if pager.is_last_page:
            break
        pager = pager.advance()

    assert seen == [(0, 25), (20, 5), (40, 0)]
    with pytest.raises(BoundaryError):
        pager.advance()
    assert pager.offset == 40


def test_advance_does_not_mutate():
    """Test advance returns a new cursor and the old one still reads page 1."""
    pager = Pager.first(30)
    nxt = pager.advance()
    assert pager.offset == 0
    assert nxt.offset == 20
    assert nxt.is_last_page


def test_empty_is_last_page():
    """Test zero records is already the last page."""
    pager = Pager.first(0)
    assert pager.is_empty
    assert pager.is_last_page
    assert pager.remaining() == 0
    with pytest.raises(BoundaryError):
        pager.advance()


def test_exact_multiple_has_no_empty_page():
    """Test 40 records end on page 2."""
    pager = Pager.first(40).advance()
    assert pager.is_last_page
    with pytest.raises(BoundaryError):
        pager.advance()


@pytest.mark.parametrize(
    "kwargs",
    [{"offset": 5}, {"offset": -20}, {"total_count": -1}, {"limit": 0}],
)
def test_invalid_cursor_rejected(kwargs):
    """Test offsets off the page grid and negative counts are rejected."""
    with pytest.raises(ValueError):
        Pager(**kwargs)


def test_describe():
    """Test footer text for empty, middle and last pages."""
    assert Pager.first(0).describe() == "No records."
    assert Pager.first(45).describe() == "Page 1 of 3 (25 more)."
    assert Pager.first(45).advance().advance().describe() == "Page 3 of 3."
