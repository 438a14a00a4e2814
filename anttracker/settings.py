from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the AntTracker terminal.

    Values are loaded from environment variables and `.env`.

    Notes:
    - The interactive session logs to a rotating file under ANT_LOG_DIR so
      the terminal only shows screens.
    - ANT_POPULATE_SAMPLE seeds an empty database with demo products,
      releases and issues on first start.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    ANT_DB_PATH: Path = Field(default=Path("data/anttracker.db"))
    ANT_POPULATE_SAMPLE: bool = Field(default=False)

    # Logging (diagnostic; stored next to the project, never on screen)
    ANT_LOG_DIR: Path = Field(default=Path("_logs"))
    ANT_LOG_LEVEL: str = Field(default="INFO")
    # Timed rotation retention count (days). Old log files are auto-deleted.
    ANT_LOG_BACKUP_COUNT: int = Field(default=14)


def load_settings(db_path: Path | None = None) -> Settings:
    s = Settings()
    if db_path is not None:
        s.ANT_DB_PATH = Path(db_path)
    # Ensure parent dir exists
    s.ANT_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    return s
