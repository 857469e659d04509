"""
logrouter Configuration Module.

Implements the Nested Settings Pattern: each sub-module is an independent
concern with its own environment variable prefix.

Multi-Environment Support:
    Set `LR_ENV` to one of: development, testing, staging, production
    The system will load .env files in this order (later overrides earlier):
    1. .env
    2. .env.local
    3. .env.{environment}
    4. .env.{environment}.local

Usage:
    from logrouter.config import settings

    settings.router.root_folder      # "app-logs"
    settings.router.minimum_severity # Severity.VERBOSE
    settings.logging.level           # LogLevel.WARNING
"""

from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict

from .environment import EnvironmentSettings
from .logging import LoggingSettings, LogLevel
from .router import RouterSettings


class Settings(BaseSettings):
    """Composite settings aggregating all configuration domains."""

    model_config = SettingsConfigDict(extra="ignore")

    @cached_property
    def environment(self) -> EnvironmentSettings:
        return EnvironmentSettings()

    @cached_property
    def router(self) -> RouterSettings:
        return RouterSettings(_env_file=self.environment.env_files)

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings(_env_file=self.environment.env_files)


# Singleton instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "EnvironmentSettings",
    "RouterSettings",
    "LoggingSettings",
    "LogLevel",
]
