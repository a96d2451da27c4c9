"""
FILE: todopro/config.py
PURPOSE: Application configuration using Pydantic Settings
EXPORTS:
  - Settings (BaseSettings subclass)
  - get_settings() -> Settings (cached)
DEPENDENCIES:
  - pydantic-settings
  - functools, pathlib (stdlib)
NOTES:
  - Values come from TODOPRO_* environment variables, then an optional .env file
  - get_settings() is cached; tests call get_settings.cache_clear() after
    changing the environment
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TODOPRO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Task API
    api_base_url: str = "http://localhost:3001/api"
    api_timeout: float = 5.0

    # True = never call the API, serve seed/synthesized data only
    offline: bool = False

    # Local data (notes, reminders, exports)
    data_dir: Path = Path("~/.todopro")
    export_prefix: str = "todopro"

    # App Settings
    log_level: str = "WARNING"

    @property
    def data_path(self) -> Path:
        """data_dir with ~ expanded."""
        return self.data_dir.expanduser()

    @property
    def notes_path(self) -> Path:
        return self.data_path / "notes.json"

    @property
    def reminders_path(self) -> Path:
        return self.data_path / "reminders.json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
