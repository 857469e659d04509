"""
Routing Configuration.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logrouter.constants import (
    DEFAULT_EXTENSION,
    DEFAULT_MAX_EXCEPTION_DEPTH,
    DEFAULT_MAX_WORKERS,
    DEFAULT_ROOT_FOLDER,
)
from logrouter.types import Severity


class RouterSettings(BaseSettings):
    """Where routed entries are written and how the dispatcher behaves."""

    model_config = SettingsConfigDict(
        env_prefix="LR_ROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    root_folder: str = Field(default=DEFAULT_ROOT_FOLDER, description="Folder every log type lives under")
    file_extension: str = Field(default=DEFAULT_EXTENSION, description="Extension of built-in log files")
    max_workers: int = Field(default=DEFAULT_MAX_WORKERS, ge=1, description="Background write threads")
    max_exception_depth: int = Field(
        default=DEFAULT_MAX_EXCEPTION_DEPTH,
        ge=1,
        description="Cause-chain links serialized before truncating",
    )
    minimum_severity: Severity = Field(
        default=Severity.VERBOSE,
        description="Entries of types below this level are dropped",
    )
    evict_on_register: bool = Field(
        default=True,
        description="Re-registering a name replaces its cached writer",
    )

    @field_validator("minimum_severity", mode="before")
    @classmethod
    def _parse_severity(cls, value):
        return Severity.parse(value)
