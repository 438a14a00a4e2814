"""Tests for configuration loading and logging setup."""
from __future__ import annotations

import logging
from pathlib import Path

from anttracker.logging import setup_logging
from anttracker.settings import Settings, load_settings


def test_defaults(monkeypatch, tmp_path):
    """Test defaults apply without environment overrides."""
    monkeypatch.chdir(tmp_path)
    for name in ("ANT_DB_PATH", "ANT_LOG_DIR", "ANT_LOG_LEVEL", "ANT_POPULATE_SAMPLE"):
        monkeypatch.delenv(name, raising=False)

    s = Settings()
    assert s.ANT_DB_PATH == Path("data/anttracker.db")
    assert s.ANT_LOG_LEVEL == "INFO"
    assert s.ANT_POPULATE_SAMPLE is False


def test_env_file_is_read(monkeypatch, tmp_path):
    """Test values from .env are picked up."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ANT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("ANT_POPULATE_SAMPLE", raising=False)
    (tmp_path / ".env").write_text("ANT_LOG_LEVEL=DEBUG\nANT_POPULATE_SAMPLE=1\n", encoding="utf-8")

    s = Settings()
    assert s.ANT_LOG_LEVEL == "DEBUG"
    assert s.ANT_POPULATE_SAMPLE is True


def test_load_settings_overrides_db_and_creates_dir(monkeypatch, tmp_path):
    """Test an explicit path wins and its directory is created."""
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "nested" / "dir" / "t.db"

    s = load_settings(target)

    assert s.ANT_DB_PATH == target
    assert target.parent.is_dir()


def test_setup_logging_writes_file(tmp_path):
    """Test logging goes to the rotating file and not the console."""
    s = Settings(ANT_DB_PATH=tmp_path / "t.db", ANT_LOG_DIR=tmp_path / "_logs", ANT_LOG_LEVEL="debug")

    log_file = setup_logging(s)
    logging.getLogger("anttracker.test").debug("hello from the test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file == tmp_path / "_logs" / "anttracker.log"
    assert "hello from the test" in log_file.read_text(encoding="utf-8")
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1

    setup_logging(s)
    assert len(logging.getLogger().handlers) == 1
