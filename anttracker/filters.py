"""Issue filter predicates and their conjunctive composition.

A ``FilterSet`` compiles to a ``Condition``: a SQL fragment over the issue
query (aliases ``i`` issues, ``p`` products, ``r`` releases) plus an
equivalent in-memory test. Predicates are ANDed; the statuses inside a
``StatusIn`` predicate are ORed.
"""
from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, Protocol, Union

from .models import Issue, Status
from .pager import Pager


@dataclass(frozen=True)
class Condition:
    sql: str = "1=1"
    params: tuple[Any, ...] = ()
    test: Callable[[Any], bool] | None = field(default=None, compare=False, repr=False)

    @classmethod
    def where(cls, sql: str, *params: Any) -> Condition:
        return cls(sql=sql, params=tuple(params))

    def matches(self, record: Any) -> bool:
        if self.test is None:
            raise TypeError(f"condition {self.sql!r} has no in-memory form")
        return self.test(record)


ALWAYS = Condition("1=1", (), lambda _record: True)


class Predicate(Protocol):
    def label(self) -> str: ...

    def to_sql(self, now: datetime) -> tuple[str, tuple[Any, ...]]: ...

    def matches(self, issue: Issue, now: datetime) -> bool: ...


@dataclass(frozen=True)
class DescriptionContains:
    text: str

    def label(self) -> str:
        return f"Description: {self.text}"

    def to_sql(self, now: datetime) -> tuple[str, tuple[Any, ...]]:
        return "instr(casefold(i.description), ?) > 0", (self.text.casefold(),)

    def matches(self, issue: Issue, now: datetime) -> bool:
        return self.text.casefold() in (issue.description or "").casefold()


@dataclass(frozen=True)
class PriorityEquals:
    priority: int

    def label(self) -> str:
        return f"Priority: {self.priority}"

    def to_sql(self, now: datetime) -> tuple[str, tuple[Any, ...]]:
        return "i.priority = ?", (self.priority,)

    def matches(self, issue: Issue, now: datetime) -> bool:
        return issue.priority == self.priority


@dataclass(frozen=True)
class ProductEquals:
    product: str

    def label(self) -> str:
        return f"Product: {self.product}"

    def to_sql(self, now: datetime) -> tuple[str, tuple[Any, ...]]:
        return "p.name = ?", (self.product,)

    def matches(self, issue: Issue, now: datetime) -> bool:
        return issue.product_name == self.product


@dataclass(frozen=True)
class AnticipatedReleaseEquals:
    release: str

    def label(self) -> str:
        return f"Release: {self.release}"

    def to_sql(self, now: datetime) -> tuple[str, tuple[Any, ...]]:
        return "r.release_id = ?", (self.release,)

    def matches(self, issue: Issue, now: datetime) -> bool:
        return issue.release_name == self.release


@dataclass(frozen=True)
class StatusIn:
    statuses: tuple[Status, ...]

    def __post_init__(self) -> None:
        if not self.statuses:
            raise ValueError("StatusIn needs at least one status")

    def label(self) -> str:
        return "Status: " + ", ".join(s.label for s in self.statuses)

    def to_sql(self, now: datetime) -> tuple[str, tuple[Any, ...]]:
        marks = ", ".join("?" for _ in self.statuses)
        return f"i.status IN ({marks})", tuple(s.value for s in self.statuses)

    def matches(self, issue: Issue, now: datetime) -> bool:
        return issue.status in self.statuses


@dataclass(frozen=True)
class CreatedWithinDays:
    days: int

    def __post_init__(self) -> None:
        if self.days < 0:
            raise ValueError("The number of days must be non-negative")

    def label(self) -> str:
        return f"Date created: within the last {self.days} days"

    def cutoff(self, now: datetime) -> datetime:
        return now - timedelta(days=self.days)

    def to_sql(self, now: datetime) -> tuple[str, tuple[Any, ...]]:
        return "i.created_at >= ?", (self.cutoff(now).isoformat(timespec="seconds"),)

    def matches(self, issue: Issue, now: datetime) -> bool:
        if issue.created_at is None:
            return False
        return issue.created_at >= self.cutoff(now).replace(microsecond=0)


IssueFilter = Union[
    DescriptionContains,
    PriorityEquals,
    ProductEquals,
    AnticipatedReleaseEquals,
    StatusIn,
    CreatedWithinDays,
]


@dataclass(frozen=True)
class FilterSet:
    """Ordered, cumulative, conjunctive list of issue filters.

    ``add`` returns a new set; the receiver is never modified so a screen
    going "back" still sees the filters it was built with.
    """

    predicates: tuple[IssueFilter, ...] = ()

    def add(self, predicate: IssueFilter) -> FilterSet:
        return FilterSet(self.predicates + (predicate,))

    def clear(self) -> FilterSet:
        return FilterSet()

    def __iter__(self) -> Iterator[IssueFilter]:
        return iter(self.predicates)

    def __len__(self) -> int:
        return len(self.predicates)

    def labels(self) -> list[str]:
        return [p.label() for p in self.predicates]

    def compile(self, now: datetime | None = None) -> Condition:
        if not self.predicates:
            return ALWAYS
        now = now or datetime.now()
        clauses: list[str] = []
        params: list[Any] = []
        for predicate in self.predicates:
            sql, values = predicate.to_sql(now)
            clauses.append(f"({sql})")
            params.extend(values)
        predicates = self.predicates

        def _test(issue: Issue) -> bool:
            return all(p.matches(issue, now) for p in predicates)

        return Condition(" AND ".join(clauses), tuple(params), _test)


def parse_statuses(text: str) -> tuple[Status, ...] | None:
    """Parse "Assessed, Done" into statuses; None if any part is unknown."""
    parts = [part.strip() for part in str(text or "").split(",")]
    statuses = [Status.parse(part) for part in parts]
    if not parts or any(s is None for s in statuses):
        return None
    return tuple(s for s in statuses if s is not None)


CountFn = Callable[[Condition], int]


@dataclass(frozen=True)
class FilteredPage:
    """Browsing state passed along the issue screens: filters plus cursor.

    The condition is compiled once and shared by the count and every page
    fetch. Any filter change builds a new first-page cursor from a fresh
    count, so a stale total cannot survive a filter change.
    """

    filters: FilterSet = field(default_factory=FilterSet)
    condition: Condition = ALWAYS
    pager: Pager = field(default_factory=Pager)

    @classmethod
    def start(cls, count: CountFn, filters: FilterSet | None = None, now: datetime | None = None) -> FilteredPage:
        filters = filters if filters is not None else FilterSet()
        condition = filters.compile(now)
        return cls(filters=filters, condition=condition, pager=Pager.first(count(condition)))

    def add_filter(self, predicate: IssueFilter, count: CountFn) -> FilteredPage:
        return FilteredPage.start(count, self.filters.add(predicate))

    def cleared(self, count: CountFn) -> FilteredPage:
        return FilteredPage.start(count, self.filters.clear())

    def refreshed(self, count: CountFn) -> FilteredPage:
        """Same filters, recounted, back on the first page."""
        return FilteredPage.start(count, self.filters)

    def with_pager(self, pager: Pager) -> FilteredPage:
        return replace(self, pager=pager)

    def next(self) -> FilteredPage:
        return self.with_pager(self.pager.advance())
