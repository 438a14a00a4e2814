"""Tests for the typer command line."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from anttracker import cli

runner = CliRunner()


@pytest.fixture
def env(tmp_path, monkeypatch):
    """Isolate settings from the developer's environment and .env."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ANT_LOG_DIR", str(tmp_path / "_logs"))
    monkeypatch.delenv("ANT_POPULATE_SAMPLE", raising=False)
    return tmp_path


def test_init_with_sample_data(env):
    """Test init creates the schema and populates an empty database."""
    db = env / "data" / "t.db"
    result = runner.invoke(cli.app, ["--db", str(db), "init", "--populate"])

    assert result.exit_code == 0, result.output
    assert "Database ready" in result.output
    assert "756 issues" in result.output
    assert db.exists()

    again = runner.invoke(cli.app, ["--db", str(db), "init", "--populate"])
    assert again.exit_code == 0
    assert "sample data not added" in again.output


def test_status_counts(env):
    """Test status prints configuration and per-source counts."""
    db = env / "t.db"
    runner.invoke(cli.app, ["--db", str(db), "init", "--populate"])

    result = runner.invoke(cli.app, ["--db", str(db), "status"])

    assert result.exit_code == 0, result.output
    assert "Configuration" in result.output
    assert "Products" in result.output
    assert "756" in result.output


def test_issues_filters(env):
    """Test the issues command narrows with filters and pages."""
    db = env / "t.db"
    runner.invoke(cli.app, ["--db", str(db), "init", "--populate"])

    result = runner.invoke(
        cli.app,
        ["--db", str(db), "issues", "--product", "Product 1", "--priority", "2", "--status", "Assessed"],
    )
    assert result.exit_code == 0, result.output
    assert "Page 1 of 2 (4 more)." in result.output

    paged = runner.invoke(cli.app, ["--db", str(db), "issues", "--page", "2"])
    assert paged.exit_code == 0, paged.output
    assert "Page 2 of 38" in paged.output


def test_issues_page_past_end(env):
    """Test asking for a page past the last one fails cleanly."""
    db = env / "t.db"
    runner.invoke(cli.app, ["--db", str(db), "init"])

    result = runner.invoke(cli.app, ["--db", str(db), "issues"])
    assert result.exit_code == 0
    assert "No issues found." in result.output

    result = runner.invoke(cli.app, ["--db", str(db), "issues", "--page", "3"])
    assert result.exit_code == 1


def test_issues_unknown_status(env):
    """Test unknown statuses are rejected."""
    db = env / "t.db"
    result = runner.invoke(cli.app, ["--db", str(db), "issues", "--status", "Open"])
    assert result.exit_code == 2
    assert "Unknown status" in result.output


def test_no_command_launches_menu(env, monkeypatch):
    """Test running without a command starts the interactive session."""
    router = MagicMock()
    monkeypatch.setattr(cli, "Router", router)
    monkeypatch.setenv("ANT_POPULATE_SAMPLE", "true")
    db = env / "t.db"

    result = runner.invoke(cli.app, ["--db", str(db)])

    assert result.exit_code == 0, result.output
    router.return_value.run.assert_called_once()
    root = router.return_value.run.call_args.args[0]
    assert root.title == "Main menu"
    assert (env / "_logs" / "anttracker.log").exists()
    assert cli.SqliteRepository(cli.load_settings(db)).count("products") == 6


def test_interrupt_says_goodbye(env, monkeypatch):
    """Test Ctrl+C at the main menu ends the session gracefully."""
    router = MagicMock()
    router.return_value.run.side_effect = KeyboardInterrupt
    monkeypatch.setattr(cli, "Router", router)

    result = runner.invoke(cli.app, ["--db", str(env / "t.db")])

    assert result.exit_code == 0
    assert "Goodbye!" in result.output
