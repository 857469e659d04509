"""
Environment Configuration.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "testing", "staging", "production"]


class EnvironmentSettings(BaseSettings):
    """Deployment environment, read from ``LR_ENV``."""

    model_config = SettingsConfigDict(
        env_prefix="LR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    env: Environment = Field(default="development", description="Selects the .env.{env} overlays")

    @property
    def env_files(self) -> tuple[str, ...]:
        """.env files for this environment; later files override earlier ones."""
        return (".env", ".env.local", f".env.{self.env}", f".env.{self.env}.local")
