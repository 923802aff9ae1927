"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Data directory
    data_dir: Path = Path("./data")

    # Sharing & export
    share_base_url: str = "http://localhost:5173/"
    export_filename: str = "creativity_resilience_export.csv"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    @property
    def db_path(self) -> Path:
        return self.data_dir / "crindex.db"

    def ensure_data_dir(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
