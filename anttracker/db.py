from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from .models import Status

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
PRAGMA foreign_keys=ON;

CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS releases (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    product_id INTEGER NOT NULL REFERENCES products(id) ON DELETE CASCADE,
    release_id TEXT NOT NULL,
    release_date TEXT NOT NULL,
    UNIQUE(product_id, release_id)
);

CREATE TABLE IF NOT EXISTS issues (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    description TEXT NOT NULL,
    product_id INTEGER NOT NULL REFERENCES products(id) ON DELETE CASCADE,
    release_id INTEGER REFERENCES releases(id) ON DELETE SET NULL,
    status TEXT NOT NULL DEFAULT 'CREATED',
    priority INTEGER NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS contacts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    phone TEXT NOT NULL,
    department TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS requests (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    issue_id INTEGER NOT NULL REFERENCES issues(id) ON DELETE CASCADE,
    release_id INTEGER NOT NULL REFERENCES releases(id) ON DELETE CASCADE,
    contact_id INTEGER NOT NULL REFERENCES contacts(id) ON DELETE CASCADE,
    requested_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_issues_status ON issues(status);
CREATE INDEX IF NOT EXISTS idx_issues_product ON issues(product_id);
CREATE INDEX IF NOT EXISTS idx_issues_created_at ON issues(created_at);
CREATE INDEX IF NOT EXISTS idx_releases_product ON releases(product_id);
CREATE INDEX IF NOT EXISTS idx_requests_issue ON requests(issue_id);
"""


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def parse_ts(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value)


def casefold(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


def connect(db_path: Path | str) -> sqlite3.Connection:
    """Open a connection with row access by column name."""
    conn = sqlite3.connect(str(db_path), timeout=10)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    # Unicode case folding for text search; SQLite LIKE only folds ASCII.
    conn.create_function("casefold", 1, casefold, deterministic=True)
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Create tables and indexes if missing."""
    conn.executescript(SCHEMA_SQL)
    conn.commit()


def is_empty(conn: sqlite3.Connection) -> bool:
    return conn.execute("SELECT COUNT(*) FROM products").fetchone()[0] == 0


_STATUS_CYCLE = (
    Status.CREATED,
    Status.ASSESSED,
    Status.IN_PROGRESS,
    Status.DONE,
    Status.CANCELLED,
)


def populate(conn: sqlite3.Connection, *, products: int = 6, releases: int = 6, issues: int = 21) -> dict[str, int]:
    """Insert demo data: every product gets `releases` releases, each with `issues` issues.

    Issue statuses cycle through the five lifecycle states so every
    transition can be tried out.
    """
    counts = {"products": 0, "releases": 0, "issues": 0}
    stamp = now_iso()
    with conn:
        for product_no in range(products):
            pid = conn.execute(
                "INSERT INTO products (name) VALUES (?)", (f"Product {product_no}",)
            ).lastrowid
            counts["products"] += 1
            for release_no in range(releases):
                rid = conn.execute(
                    "INSERT INTO releases (product_id, release_id, release_date) VALUES (?, ?, ?)",
                    (pid, str(release_no), stamp),
                ).lastrowid
                counts["releases"] += 1
                for issue_no in range(issues):
                    conn.execute(
                        "INSERT INTO issues (description, product_id, release_id, status, priority, created_at)"
                        " VALUES (?, ?, ?, ?, ?, ?)",
                        (
                            f"Issue {issue_no}",
                            pid,
                            rid,
                            _STATUS_CYCLE[issue_no % len(_STATUS_CYCLE)].value,
                            issue_no % 5 + 1,
                            stamp,
                        ),
                    )
                    counts["issues"] += 1
    logger.info("Populated sample data: %s", counts)
    return counts
