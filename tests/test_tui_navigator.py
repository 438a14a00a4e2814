"""Unit tests for Navigator class."""
from __future__ import annotations

from anttracker.tui.components import MenuScreen
from anttracker.tui.navigator import Navigator

MAIN = MenuScreen(title="Main menu")
ISSUES = MenuScreen(title="VIEW/EDIT ISSUE")
RESULTS = MenuScreen(title="Search Results")


def test_navigator_initial_state():
    """Test navigator starts at the root level."""
    nav = Navigator()
    assert nav.depth() == 0
    assert nav.breadcrumbs(MAIN) == "Main menu"


def test_navigator_push():
    """Test pushing openers onto the stack."""
    nav = Navigator()

    nav.push(MAIN)
    assert nav.depth() == 1
    assert nav.breadcrumbs(ISSUES) == "Main menu > VIEW/EDIT ISSUE"

    nav.push(ISSUES)
    assert nav.depth() == 2
    assert nav.breadcrumbs(RESULTS) == "Main menu > VIEW/EDIT ISSUE > Search Results"


def test_navigator_pop():
    """Test popping returns the most recent opener."""
    nav = Navigator()
    nav.push(MAIN)
    nav.push(ISSUES)

    assert nav.pop() is ISSUES
    assert nav.depth() == 1
    assert nav.pop() is MAIN
    assert nav.depth() == 0


def test_navigator_pop_at_root():
    """Test popping at root returns None and doesn't change state."""
    nav = Navigator()
    assert nav.pop() is None
    assert nav.depth() == 0


def test_navigator_home():
    """Test home unwinds every level to the root opener."""
    nav = Navigator()
    nav.push(MAIN)
    nav.push(ISSUES)
    nav.push(RESULTS)

    assert nav.home() is MAIN
    assert nav.depth() == 0
    assert nav.home() is None


def test_navigator_untitled_screen():
    """Test screens without a title get a placeholder in breadcrumbs."""
    nav = Navigator()
    nav.push(MAIN)
    assert nav.breadcrumbs(MenuScreen()) == "Main menu > …"
