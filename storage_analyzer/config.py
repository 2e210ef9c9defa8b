"""Configuration management for the Storage Analyzer."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_ANALYZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    api_title: str = "Storage Analyzer API"
    api_version: str = "1.0.0"
    api_description: str = "Per-volume storage usage analysis: folders, file types, large and stale files"
    debug: bool = False

    # Performance Settings
    max_workers: Optional[int] = Field(None, ge=1)  # None -> executor default
    chunk_size: int = Field(10_000, ge=1)

    # Scan Settings
    shallow_depth: int = Field(3, ge=1, le=3)
    hidden_prefix: str = "."

    # Report thresholds
    min_folder_size_gb: float = Field(0.1, ge=0)
    min_extension_size_gb: float = Field(0.01, ge=0)
    min_large_file_size_mb: float = Field(0.0, ge=0)  # 0 disables the size floor
    top_n: int = Field(10, ge=1)
    recent_days: int = Field(30, ge=0)
    old_days: int = Field(180, ge=0)

    # Output
    date_format: str = "%Y-%m-%d %H:%M:%S"

    # CORS Settings
    cors_origins: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("hidden_prefix")
    @classmethod
    def _non_empty_prefix(cls, value: str) -> str:
        if not value:
            raise ValueError("hidden_prefix cannot be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
