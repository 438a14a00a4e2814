"""Record types and the issue lifecycle."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Status(str, Enum):
    """Lifecycle state of an issue.

    The value is the stored code; ``label`` is what users see and type.
    """

    CREATED = "CREATED"
    ASSESSED = "ASSESSED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    CANCELLED = "CANCELLED"

    @property
    def label(self) -> str:
        return _LABELS[self]

    def __str__(self) -> str:
        return self.label

    @classmethod
    def parse(cls, text: str) -> Status | None:
        """Return the status whose label (or stored code) is ``text``."""
        s = str(text or "").strip()
        for status in cls:
            if s == status.label or s == status.value:
                return status
        return None


_LABELS = {
    Status.CREATED: "Created",
    Status.ASSESSED: "Assessed",
    Status.IN_PROGRESS: "InProgress",
    Status.DONE: "Done",
    Status.CANCELLED: "Cancelled",
}


# Fixed transition table. Done and Cancelled are terminal.
NEXT_STATUSES: dict[Status, tuple[Status, ...]] = {
    Status.CREATED: (Status.ASSESSED,),
    Status.ASSESSED: (Status.IN_PROGRESS, Status.DONE, Status.CANCELLED),
    Status.IN_PROGRESS: (Status.DONE, Status.CANCELLED),
    Status.DONE: (),
    Status.CANCELLED: (),
}


def next_statuses(status: Status) -> tuple[Status, ...]:
    return NEXT_STATUSES[status]


def is_terminal(status: Status) -> bool:
    return not NEXT_STATUSES[status]


@dataclass(frozen=True)
class Product:
    name: str
    id: int | None = None


@dataclass(frozen=True)
class Release:
    release_id: str
    product_id: int
    release_date: datetime | None = None
    product_name: str | None = None
    id: int | None = None


@dataclass(frozen=True)
class Issue:
    description: str
    product_id: int
    priority: int
    status: Status = Status.CREATED
    release_id: int | None = None
    created_at: datetime | None = None
    # Joined for display and filtering; not written back.
    product_name: str | None = None
    release_name: str | None = None
    id: int | None = None


@dataclass(frozen=True)
class Contact:
    name: str
    email: str
    phone: str
    department: str
    id: int | None = None


@dataclass(frozen=True)
class Request:
    issue_id: int
    release_id: int
    contact_id: int
    requested_at: datetime | None = None
    release_name: str | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    contact_department: str | None = None
    id: int | None = None
