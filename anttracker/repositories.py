from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from .db import connect, init_db, now_iso, parse_ts
from .filters import ALWAYS, Condition
from .models import Contact, Issue, Product, Release, Request, Status
from .settings import Settings

logger = logging.getLogger(__name__)


class NotFoundError(LookupError):
    """The referenced record does not exist (anymore)."""

    def __init__(self, source: str, record_id: object):
        super().__init__(f"{source} #{record_id} not found")
        self.source = source
        self.record_id = record_id


class Repository(Protocol):
    """Storage collaborator used by the screens.

    ``source`` names one of: products, releases, issues, contacts, requests.
    """

    def count(self, source: str, condition: Condition = ALWAYS) -> int: ...

    def fetch_page(
        self,
        source: str,
        condition: Condition = ALWAYS,
        *,
        offset: int = 0,
        limit: int = 20,
        order_by: str | None = None,
    ) -> list[Any]: ...

    def find_all(self, source: str, condition: Condition = ALWAYS, *, order_by: str | None = None) -> list[Any]: ...

    def find_by_id(self, source: str, record_id: int) -> Any | None: ...

    def update_by_id(self, source: str, record_id: int, mutator: Callable[[Any], Any]) -> Any: ...

    def insert(self, source: str, fields: Mapping[str, Any]) -> Any: ...

    def product_names(self) -> list[str]: ...

    def release_ids(self) -> list[str]: ...

    def releases_for_product(self, product_id: int) -> list[Release]: ...


@dataclass(frozen=True)
class _Source:
    table: str
    alias: str
    select: str
    joins: str
    order_by: str
    to_record: Callable[[sqlite3.Row], Any]
    # Record attributes written on insert/update (attribute == column).
    writable: tuple[str, ...]
    defaults: Callable[[], dict[str, Any]] = field(default=dict)

    def from_sql(self) -> str:
        return f"FROM {self.table} {self.alias} {self.joins}".rstrip()


def _product(row: sqlite3.Row) -> Product:
    return Product(id=row["id"], name=row["name"])


def _release(row: sqlite3.Row) -> Release:
    return Release(
        id=row["id"],
        release_id=row["release_id"],
        product_id=row["product_id"],
        release_date=parse_ts(row["release_date"]),
        product_name=row["product_name"],
    )


def _issue(row: sqlite3.Row) -> Issue:
    return Issue(
        id=row["id"],
        description=row["description"],
        product_id=row["product_id"],
        release_id=row["release_id"],
        status=Status(row["status"]),
        priority=row["priority"],
        created_at=parse_ts(row["created_at"]),
        product_name=row["product_name"],
        release_name=row["release_name"],
    )


def _contact(row: sqlite3.Row) -> Contact:
    return Contact(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        phone=row["phone"],
        department=row["department"],
    )


def _request(row: sqlite3.Row) -> Request:
    return Request(
        id=row["id"],
        issue_id=row["issue_id"],
        release_id=row["release_id"],
        contact_id=row["contact_id"],
        requested_at=parse_ts(row["requested_at"]),
        release_name=row["release_name"],
        contact_name=row["contact_name"],
        contact_email=row["contact_email"],
        contact_department=row["contact_department"],
    )


SOURCES: dict[str, _Source] = {
    "products": _Source(
        table="products",
        alias="p",
        select="p.id, p.name",
        joins="",
        order_by="p.id",
        to_record=_product,
        writable=("name",),
    ),
    "releases": _Source(
        table="releases",
        alias="r",
        select="r.id, r.release_id, r.product_id, r.release_date, p.name AS product_name",
        joins="JOIN products p ON p.id = r.product_id",
        order_by="r.product_id, r.id",
        to_record=_release,
        writable=("release_id", "product_id", "release_date"),
        defaults=lambda: {"release_date": now_iso()},
    ),
    "issues": _Source(
        table="issues",
        alias="i",
        select=(
            "i.id, i.description, i.product_id, i.release_id, i.status, i.priority, i.created_at, "
            "p.name AS product_name, r.release_id AS release_name"
        ),
        joins="JOIN products p ON p.id = i.product_id LEFT JOIN releases r ON r.id = i.release_id",
        order_by="i.id",
        to_record=_issue,
        writable=("description", "product_id", "release_id", "status", "priority", "created_at"),
        defaults=lambda: {"status": Status.CREATED.value, "created_at": now_iso()},
    ),
    "contacts": _Source(
        table="contacts",
        alias="c",
        select="c.id, c.name, c.email, c.phone, c.department",
        joins="",
        order_by="c.name, c.id",
        to_record=_contact,
        writable=("name", "email", "phone", "department"),
    ),
    "requests": _Source(
        table="requests",
        alias="q",
        select=(
            "q.id, q.issue_id, q.release_id, q.contact_id, q.requested_at, "
            "r.release_id AS release_name, c.name AS contact_name, "
            "c.email AS contact_email, c.department AS contact_department"
        ),
        joins="JOIN releases r ON r.id = q.release_id JOIN contacts c ON c.id = q.contact_id",
        order_by="q.requested_at DESC, q.id",
        to_record=_request,
        writable=("issue_id", "release_id", "contact_id", "requested_at"),
        defaults=lambda: {"requested_at": now_iso()},
    ),
}


def _source(name: str) -> _Source:
    try:
        return SOURCES[name]
    except KeyError:
        raise ValueError(f"unknown record source: {name!r}") from None


def _to_db(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    return value


class SqliteRepository:
    def __init__(self, settings: Settings):
        self.settings = settings
        self._connection: sqlite3.Connection | None = None

    def _conn(self) -> sqlite3.Connection:
        if self._connection is None:
            conn = connect(self.settings.ANT_DB_PATH)
            init_db(conn)
            self._connection = conn
        return self._connection

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def count(self, source: str, condition: Condition = ALWAYS) -> int:
        src = _source(source)
        sql = f"SELECT COUNT(*) {src.from_sql()} WHERE {condition.sql}"
        return int(self._conn().execute(sql, condition.params).fetchone()[0])

    def fetch_page(
        self,
        source: str,
        condition: Condition = ALWAYS,
        *,
        offset: int = 0,
        limit: int = 20,
        order_by: str | None = None,
    ) -> list[Any]:
        src = _source(source)
        sql = (
            f"SELECT {src.select} {src.from_sql()} WHERE {condition.sql} "
            f"ORDER BY {order_by or src.order_by} LIMIT ? OFFSET ?"
        )
        rows = self._conn().execute(sql, (*condition.params, limit, offset)).fetchall()
        return [src.to_record(r) for r in rows]

    def find_all(self, source: str, condition: Condition = ALWAYS, *, order_by: str | None = None) -> list[Any]:
        src = _source(source)
        sql = f"SELECT {src.select} {src.from_sql()} WHERE {condition.sql} ORDER BY {order_by or src.order_by}"
        rows = self._conn().execute(sql, condition.params).fetchall()
        return [src.to_record(r) for r in rows]

    def find_by_id(self, source: str, record_id: int) -> Any | None:
        src = _source(source)
        row = self._conn().execute(
            f"SELECT {src.select} {src.from_sql()} WHERE {src.alias}.id = ?",
            (record_id,),
        ).fetchone()
        return src.to_record(row) if row else None

    def update_by_id(self, source: str, record_id: int, mutator: Callable[[Any], Any]) -> Any:
        """Apply ``mutator`` to the stored record and persist the changed columns.

        Read, mutate and write happen in one transaction. Returns the record
        as re-read from storage.
        """
        src = _source(source)
        conn = self._conn()
        with conn:
            current = self.find_by_id(source, record_id)
            if current is None:
                raise NotFoundError(source, record_id)
            updated = mutator(current)
            changes = {
                col: _to_db(getattr(updated, col))
                for col in src.writable
                if getattr(updated, col) != getattr(current, col)
            }
            if changes:
                assignments = ", ".join(f"{col} = ?" for col in changes)
                conn.execute(
                    f"UPDATE {src.table} SET {assignments} WHERE id = ?",
                    (*changes.values(), record_id),
                )
                logger.info("Updated %s #%s: %s", source, record_id, sorted(changes))
        fresh = self.find_by_id(source, record_id)
        if fresh is None:
            raise NotFoundError(source, record_id)
        return fresh

    def insert(self, source: str, fields: Mapping[str, Any]) -> Any:
        src = _source(source)
        unknown = set(fields) - set(src.writable)
        if unknown:
            raise ValueError(f"unknown {source} fields: {sorted(unknown)}")
        values = {**src.defaults(), **{k: _to_db(v) for k, v in fields.items()}}
        cols = ", ".join(values)
        marks = ", ".join("?" for _ in values)
        conn = self._conn()
        with conn:
            new_id = conn.execute(
                f"INSERT INTO {src.table} ({cols}) VALUES ({marks})",
                tuple(values.values()),
            ).lastrowid
        logger.info("Inserted %s #%s", source, new_id)
        return self.find_by_id(source, int(new_id))

    # Convenience lookups used by menus.

    def product_names(self) -> list[str]:
        return [p.name for p in self.find_all("products", order_by="p.name")]

    def release_ids(self) -> list[str]:
        seen: dict[str, None] = {}
        for release in self.find_all("releases", order_by="r.release_id"):
            seen.setdefault(release.release_id, None)
        return list(seen)

    def releases_for_product(self, product_id: int) -> list[Release]:
        return self.find_all("releases", Condition.where("r.product_id = ?", product_id))
