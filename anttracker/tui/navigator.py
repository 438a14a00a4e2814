"""Stack of return points for nested menu levels."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .components import Screen


class Navigator:
    """Stack-based navigation with breadcrumbs.

    Holds the screens that opened the levels below them:
    - Push on Descend: entering a sub-menu remembers the opener
    - Pop on Back: the abort token returns to the most recent opener
    - Home: drops every level and returns the root opener
    An empty stack means the current screen is the root.
    """

    def __init__(self) -> None:
        self.stack: list[Screen] = []

    def push(self, screen: Screen) -> None:
        """Remember ``screen`` as the return point of a new level."""
        self.stack.append(screen)

    def pop(self) -> Screen | None:
        """Leave the current level.

        Returns:
            The screen to resume, or None if already at the root level
        """
        if self.stack:
            return self.stack.pop()
        return None

    def home(self) -> Screen | None:
        """Unwind every level, returning the root screen (None if at root)."""
        if not self.stack:
            return None
        root = self.stack[0]
        self.stack = []
        return root

    def depth(self) -> int:
        return len(self.stack)

    def breadcrumbs(self, current: Screen | None = None) -> str:
        """Breadcrumb path like "Main menu > VIEW/EDIT ISSUE > Issue #4"."""
        screens = list(self.stack)
        if current is not None:
            screens.append(current)
        labels = [getattr(s, "title", None) or "…" for s in screens]
        return " > ".join(labels)
