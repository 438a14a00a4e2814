"""Page cursor over a counted result set."""
from __future__ import annotations

import math
from dataclasses import dataclass, replace

PAGE_LIMIT = 20


class BoundaryError(Exception):
    """Raised when paging past the last page."""


@dataclass(frozen=True)
class Pager:
    """Offset/limit cursor over ``total_count`` records.

    A pager is a value: ``advance()`` returns a new cursor and leaves this
    one untouched, so screens holding an older page keep rendering it.
    ``total_count`` must come from a count over the same condition the
    page rows are fetched with.
    """

    total_count: int = 0
    offset: int = 0
    limit: int = PAGE_LIMIT

    def __post_init__(self) -> None:
        if self.limit <= 0:
            raise ValueError(f"limit must be positive, got {self.limit}")
        if self.total_count < 0:
            raise ValueError(f"total_count must be non-negative, got {self.total_count}")
        if self.offset < 0 or self.offset % self.limit:
            raise ValueError(f"offset must be a non-negative multiple of {self.limit}, got {self.offset}")

    @classmethod
    def first(cls, total_count: int) -> Pager:
        return cls(total_count=total_count)

    @property
    def page_index(self) -> int:
        return self.offset // self.limit

    @property
    def page_count(self) -> int:
        return math.ceil(self.total_count / self.limit)

    @property
    def last_page_index(self) -> int:
        return self.page_count - 1

    @property
    def is_last_page(self) -> bool:
        return self.page_index >= self.last_page_index

    @property
    def is_empty(self) -> bool:
        return self.total_count == 0

    def remaining(self) -> int:
        """Records after the current page (display only)."""
        return max(0, self.total_count - self.limit * (self.page_index + 1))

    def advance(self) -> Pager:
        if self.is_last_page:
            raise BoundaryError("Already reached the last page.")
        return replace(self, offset=self.offset + self.limit)

    def describe(self) -> str:
        if self.is_empty:
            return "No records."
        text = f"Page {self.page_index + 1} of {self.page_count}"
        more = self.remaining()
        if more:
            text += f" ({more} more)"
        return text + "."
