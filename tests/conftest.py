from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta
from typing import Any

import pytest


def _ensure_project_root_on_path() -> None:
    # When running via the venv's pytest entrypoint, the CWD is not guaranteed to
    # be on sys.path. Ensure the repository root (containing `anttracker/`) is importable.
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


_ensure_project_root_on_path()

from anttracker.db import connect, init_db  # noqa: E402
from anttracker.repositories import SqliteRepository  # noqa: E402
from anttracker.settings import Settings  # noqa: E402
from fakes import FakeTerminal  # noqa: E402


@pytest.fixture
def terminal() -> FakeTerminal:
    return FakeTerminal()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        ANT_DB_PATH=tmp_path / "anttracker.db",
        ANT_LOG_DIR=tmp_path / "_logs",
        ANT_POPULATE_SAMPLE=False,
    )


@pytest.fixture
def repo(settings):
    repository = SqliteRepository(settings)
    yield repository
    repository.close()


@pytest.fixture
def seed(settings):
    """Insert rows directly; returns a helper keyed by table name."""
    conn = connect(settings.ANT_DB_PATH)
    init_db(conn)

    def _insert(table: str, **fields: Any) -> int:
        cols = ", ".join(fields)
        marks = ", ".join("?" for _ in fields)
        with conn:
            return int(conn.execute(f"INSERT INTO {table} ({cols}) VALUES ({marks})", tuple(fields.values())).lastrowid)

    yield _insert
    conn.close()


def days_ago(days: int) -> str:
    return (datetime.now() - timedelta(days=days)).isoformat(timespec="seconds")


@pytest.fixture
def catalog(seed):
    """Two products with releases; returns the ids by name."""
    ids = {
        "Product 1": seed("products", name="Product 1"),
        "Product 2": seed("products", name="Product 2"),
    }
    ids["1.0"] = seed("releases", product_id=ids["Product 1"], release_id="1.0", release_date=days_ago(30))
    ids["1.1"] = seed("releases", product_id=ids["Product 1"], release_id="1.1", release_date=days_ago(10))
    ids["2.0"] = seed("releases", product_id=ids["Product 2"], release_id="2.0", release_date=days_ago(5))
    return ids


@pytest.fixture
def make_issue(seed, catalog):
    def _make(
        description: str = "Crash on save",
        product: str = "Product 1",
        release: str | None = "1.0",
        status: str = "CREATED",
        priority: int = 3,
        age_days: int = 0,
    ) -> int:
        return seed(
            "issues",
            description=description,
            product_id=catalog[product],
            release_id=catalog[release] if release else None,
            status=status,
            priority=priority,
            created_at=days_ago(age_days),
        )

    return _make
