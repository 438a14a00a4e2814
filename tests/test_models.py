"""Unit tests for the issue status lifecycle."""
from __future__ import annotations

import pytest

from anttracker.models import NEXT_STATUSES, Status, is_terminal, next_statuses


def test_transition_table():
    """Test the fixed successor sets of every status."""
    assert next_statuses(Status.CREATED) == (Status.ASSESSED,)
    assert next_statuses(Status.ASSESSED) == (Status.IN_PROGRESS, Status.DONE, Status.CANCELLED)
    assert next_statuses(Status.IN_PROGRESS) == (Status.DONE, Status.CANCELLED)
    assert next_statuses(Status.DONE) == ()
    assert next_statuses(Status.CANCELLED) == ()


def test_every_status_has_an_entry():
    """Test the table covers the whole enumeration."""
    assert set(NEXT_STATUSES) == set(Status)


def test_terminal_statuses():
    """Test only Done and Cancelled are terminal."""
    assert [s for s in Status if is_terminal(s)] == [Status.DONE, Status.CANCELLED]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("InProgress", Status.IN_PROGRESS),
        ("IN_PROGRESS", Status.IN_PROGRESS),
        (" Done ", Status.DONE),
        ("done", None),
        ("", None),
    ],
)
def test_parse(text, expected):
    """Test statuses parse from their label or stored code."""
    assert Status.parse(text) is expected


def test_label_is_display_text():
    """Test labels are what the screens show."""
    assert Status.IN_PROGRESS.label == "InProgress"
    assert str(Status.CANCELLED) == "Cancelled"
