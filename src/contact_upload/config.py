"""
Application configuration with environment-driven settings.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "contact-upload"
    app_env: Literal["dev", "qa", "uat", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to",
    )
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Port the HTTP server listens on",
    )

    # Upload store
    upload_dir: Path = Field(
        default=Path("uploads"),
        description="Directory where accepted CSV files are stored",
    )
    upload_chunk_size: int = Field(
        default=1024 * 1024,
        gt=0,
        description="Chunk size in bytes used when streaming uploads to disk",
    )

    # CSV parsing
    csv_encoding: str = Field(
        default="utf-8",
        description="Encoding used to decode stored CSV files",
    )
    csv_delimiter: str = Field(
        default=",",
        min_length=1,
        max_length=1,
        description="CSV field delimiter",
    )

    # CORS (permissive defaults, not suitable for production as-is)
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )
    cors_methods: str = Field(
        default="GET,POST,OPTIONS",
        description="Comma-separated list of allowed CORS methods",
    )
    cors_headers: str = Field(
        default="Content-Type,Authorization",
        description="Comma-separated list of allowed CORS request headers",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level names to upper case."""
        return str(v).strip().upper()

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return _split_csv_setting(self.cors_origins)

    @property
    def cors_methods_list(self) -> list[str]:
        """Parse CORS methods into a list."""
        return [m.upper() for m in _split_csv_setting(self.cors_methods)]

    @property
    def cors_headers_list(self) -> list[str]:
        """Parse CORS headers into a list."""
        return _split_csv_setting(self.cors_headers)


def _split_csv_setting(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
