"""
Application configuration using 12-factor environment variables.

Every setting is read from ``DM_ARCHIVE_<NAME>`` (or a ``.env`` file),
e.g. ``DM_ARCHIVE_DATABASE_URL``.
"""
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Archive service settings."""
    
    model_config = SettingsConfigDict(
        env_prefix="DM_ARCHIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    app_name: str = Field(default="Kind 4 Archive")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False, description="Echo SQL statements")
    
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    
    database_url: str = Field(default="sqlite:///./data/archive.db")
    
    log_level: LogLevel = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="json")
    
    @field_validator("log_level", "log_format", mode="before")
    @classmethod
    def normalize_case(cls, v, info):
        if isinstance(v, str):
            return v.upper() if info.field_name == "log_level" else v.lower()
        return v
    
    @property
    def sqlite_path(self) -> Optional[Path]:
        """File backing a SQLite archive; None for other backends or in-memory."""
        url = make_url(self.database_url)
        if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
            return None
        return Path(url.database)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
