"""Files Manager configuration settings."""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from filesmanager.infrastructure.config.settings_utils import (
    env_bool,
    env_int,
    env_list,
    env_optional_str,
    env_str,
)
from filesmanager.infrastructure.logging_setup import configure_logging
from filesmanager.infrastructure.storage.io_bytes import fsync_enabled


class Settings(BaseSettings):
    """Application settings with env var support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    storage_location: Optional[str] = Field(
        default_factory=lambda: env_optional_str("FILESMANAGER_STORAGE_LOCATION")
    )
    path_separator: str = Field(
        default_factory=lambda: env_str("FILESMANAGER_PATH_SEPARATOR", "_")
    )
    guard_symlinks: bool = Field(
        default_factory=lambda: env_bool("FILESMANAGER_GUARD_SYMLINKS", True)
    )
    fsync_writes: bool = Field(default_factory=fsync_enabled)

    # Server/observability
    api_host: str = Field(default_factory=lambda: env_str("FILESMANAGER_HOST", "0.0.0.0"))
    api_port: int = Field(
        default_factory=lambda: env_int("FILESMANAGER_PORT", 8080, minimum=1, maximum=65535)
    )
    api_reload: bool = Field(default_factory=lambda: env_bool("FILESMANAGER_RELOAD", False))
    log_level: str = Field(default_factory=lambda: env_str("FILESMANAGER_LOG_LEVEL", "INFO"))
    log_json: bool = Field(default_factory=lambda: env_bool("FILESMANAGER_LOG_JSON", False))
    cors_origins: list[str] = Field(
        default_factory=lambda: env_list("FILESMANAGER_CORS_ORIGINS", default=["*"])
    )

    @field_validator("path_separator")
    @classmethod
    def _default_separator(cls, value: str) -> str:
        value = (value or "").strip()
        if not value or value in ("/", "\\"):
            return "_"
        return value

    def setup_logging(self) -> None:
        configure_logging(level=self.log_level, json_logs=self.log_json)


# Global settings instance
settings = Settings()
