"""Configuration management for Entra ID public clients."""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_AUTHORITY_HOST = "login.microsoftonline.com"


class Settings(BaseSettings):
    """Client settings loaded from ENTRA_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="ENTRA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application registration
    client_id: str | None = Field(
        default=None, description="Application (client) ID of the public client"
    )
    tenant_id: str | None = Field(
        default=None, description="Directory (tenant) ID or verified domain name"
    )
    authority_host: str = Field(
        default=DEFAULT_AUTHORITY_HOST,
        description="Authority host name, without scheme or path",
    )

    # Transport
    request_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for each HTTP request"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Path | None = Field(default=None, description="Optional log file path")

    @field_validator("authority_host")
    @classmethod
    def validate_authority_host(cls, v: str) -> str:
        """Validate that authority_host is a bare host name."""
        v = v.strip()
        if not v:
            raise ValueError("Authority host must not be empty")
        if "://" in v or "/" in v:
            raise ValueError("Authority host must be a host name without scheme or path")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize the log level name."""
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level
