"""
Configuration management.

Loads settings from environment variables and .env file.
Prefix: MEMGRID_
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MEMGRID_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Backend selection
    backend: Literal["local", "supabase"] = Field(
        default="local",
        description="'local' uses SQLite accounts and rows, 'supabase' the managed service",
    )

    # Managed service
    supabase_url: str = Field(default="", description="Project URL, e.g. https://xyz.supabase.co")
    supabase_anon_key: str = Field(default="", description="Public anon API key")
    table_name: str = Field(default="memories", description="Table holding memory rows")
    request_timeout: float = Field(default=10.0, description="HTTP timeout in seconds")

    # Storage
    data_dir: Path = Field(default=Path("data"), description="Data storage directory")
    db_name: str = Field(default="memgrid.db", description="SQLite database name")
    export_dir: Path = Field(default=Path("exports"), description="Where exports are written")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name

    @property
    def export_path(self) -> Path:
        if self.export_dir.is_absolute():
            return self.export_dir
        return self.data_dir / self.export_dir


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
