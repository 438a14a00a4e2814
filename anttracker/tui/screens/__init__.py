"""Screen modules for the TUI."""
from __future__ import annotations

from . import issue_view, issues, main, records, search

__all__ = [
    "issue_view",
    "issues",
    "main",
    "records",
    "search",
]
