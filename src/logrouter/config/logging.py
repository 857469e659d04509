"""
Diagnostics Logging Configuration.

Controls how logrouter reports on itself (registrations, writer lifecycle),
not where routed entries go; that is `RouterSettings`.
"""

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logrouter.logging.sinks import SINK_NAMES, LogFormat


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingSettings(BaseSettings):
    """Internal diagnostics configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LR_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: LogLevel = Field(default=LogLevel.WARNING, description="Lowest diagnostics level emitted")
    sinks: str = Field(default="stdio", description="Comma-separated sink names (stdio, file)")
    format: LogFormat = Field(default="console", description="stdio sink rendering")
    file_path: str = Field(default="logs/logrouter.log", description="Diagnostics file for the file sink")
    file_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="Size before the file sink rotates")
    file_backup_count: int = Field(default=5, ge=1, description="Rotated files kept by the file sink")
    console_timestamp_format: str = Field(default="%Y-%m-%d %H:%M:%S", description="Console timestamp format")
    console_level_width: int = Field(default=8, ge=1, description="Console level column width")
    console_logger_width: int = Field(default=32, ge=1, description="Console logger column width")
    console_separator: str = Field(default=" | ", description="Console column separator")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("format", mode="before")
    @classmethod
    def _lower_format(cls, value):
        return value.lower() if isinstance(value, str) else value

    @field_validator("sinks")
    @classmethod
    def _known_sinks(cls, value: str) -> str:
        names = [name.strip().lower() for name in value.split(",") if name.strip()]
        unknown = sorted(set(names) - set(SINK_NAMES))
        if unknown:
            raise ValueError(f"unknown log sinks: {', '.join(unknown)}")
        return ",".join(names)
