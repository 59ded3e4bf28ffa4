# Settings for the remote file explorer client.
# Created: 2026-03-02
#
# All values come from POCKETFS_* environment variables or a local .env file.

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_config_dir() -> Path:
    """Get/create the ~/.pocketfs directory."""
    d = Path.home() / ".pocketfs"
    d.mkdir(parents=True, exist_ok=True)
    return d


class Settings(BaseSettings):
    """Client-side configuration for talking to a remote host agent."""

    model_config = SettingsConfigDict(
        env_prefix="POCKETFS_",
        env_file=".env",
        extra="ignore",
    )

    # Remote agent
    api_base_url: str = "http://localhost:7780"
    api_prefix: str = "/api"
    auth_token: str | None = None
    csrf_token: str | None = None
    request_timeout: float = 30.0
    transfer_timeout: float = 300.0

    # Explorer behaviour
    tail_interval: float = Field(default=2.0, gt=0)
    download_cleanup_delay: float = Field(default=2.0, ge=0)
    home_folder: str = ""
    default_page_size: int = 50

    # Local state
    downloads_dir: Path | None = None
    layout_file: Path | None = None

    log_level: str = "INFO"

    def resolved_downloads_dir(self) -> Path:
        """Where downloaded files are written (created on demand)."""
        d = self.downloads_dir or get_config_dir() / "downloads"
        d.mkdir(parents=True, exist_ok=True)
        return d

    def resolved_layout_file(self) -> Path:
        return self.layout_file or get_config_dir() / "layout.json"


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    return Settings()
