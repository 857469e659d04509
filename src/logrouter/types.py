"""
Log-type data model.

A log type decides where an entry goes (folder and file name), how the file
rolls over, the severity every entry of that type is written at, and the
template each entry is rendered with.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum, IntEnum
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_EXTENSION,
    DEFAULT_FOLDER,
    DEFAULT_OUTPUT_TEMPLATE,
    DEFAULT_ROOT_FOLDER,
)


class Severity(IntEnum):
    """Ordinal severity levels, ascending."""

    VERBOSE = 0
    DEBUG = 1
    INFORMATION = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5

    @property
    def abbreviation(self) -> str:
        return _ABBREVIATIONS[self]

    @property
    def method_name(self) -> str:
        """Name of the structlog method that carries this level."""
        return _METHOD_NAMES[self]

    @classmethod
    def parse(cls, value: "Severity | int | str") -> "Severity":
        """Parse a level from an instance, an ordinal, a name or an abbreviation."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        text = str(value).strip().upper()
        if text in cls.__members__:
            return cls[text]
        for level, abbreviation in _ABBREVIATIONS.items():
            if abbreviation == text:
                return level
        if text.isdigit():
            return cls(int(text))
        raise ValueError(f"Unknown severity '{value}'")


_ABBREVIATIONS = {
    Severity.VERBOSE: "VRB",
    Severity.DEBUG: "DBG",
    Severity.INFORMATION: "INF",
    Severity.WARNING: "WRN",
    Severity.ERROR: "ERR",
    Severity.FATAL: "FTL",
}

_METHOD_NAMES = {
    Severity.VERBOSE: "debug",
    Severity.DEBUG: "debug",
    Severity.INFORMATION: "info",
    Severity.WARNING: "warning",
    Severity.ERROR: "error",
    Severity.FATAL: "critical",
}


class RollingInterval(str, Enum):
    """How often a log file is closed and a new one started."""

    INFINITE = "infinite"
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"

    @property
    def stamp_format(self) -> str:
        return _STAMP_FORMATS[self]

    def stamp(self, moment: datetime) -> str:
        """Period stamp inserted into the file name for the period containing ``moment``."""
        if not self.stamp_format:
            return ""
        return moment.strftime(self.stamp_format)


_STAMP_FORMATS = {
    RollingInterval.INFINITE: "",
    RollingInterval.YEAR: "%Y",
    RollingInterval.MONTH: "%Y%m",
    RollingInterval.DAY: "%Y%m%d",
    RollingInterval.HOUR: "%Y%m%d%H",
    RollingInterval.MINUTE: "%Y%m%d%H%M",
}


class LogCategory(str, Enum):
    """Built-in log categories."""

    DEFAULT = "Default"  # general purpose catch-all
    STARTUP = "Startup"
    STARTUP_EXCEPTION = "StartupException"
    TRACE_LOG = "TraceLog"  # business or infrastructure tracing
    TRACE_LOG_EXCEPTION = "TraceLogException"
    TRACE_LOG_FAILURE = "TraceLogFailure"
    EXCEPTION = "Exception"
    EXCEPTION_DATABASE = "ExceptionDatabase"
    EXCEPTION_DATA_TAMPER = "ExceptionDataTamper"  # integrity violations
    EXCEPTION_FAILURE = "ExceptionFailure"  # failures while handling or recovering
    FAILURE = "Failure"  # non-exception failures (commands, workflows)


@runtime_checkable
class LogType(Protocol):
    """
    Contract for a routable log type.

    Custom log types can implement this directly; ``LogTypeDescriptor`` is
    the default implementation.
    """

    name: str
    minimum_severity: Severity
    rolling_interval: RollingInterval
    output_template: str

    def log_path(self, log_id: Optional[str] = None) -> str:
        """File path for this type, optionally scoped to a per-instance ``log_id``."""
        ...


def normalize_name(name: str) -> str:
    """Lookup key for a log type name."""
    return name.lower()


class LogTypeDescriptor(BaseModel):
    """Immutable routing policy for one log type."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(default="Default", min_length=1)
    folder: str = DEFAULT_FOLDER
    root: str = DEFAULT_ROOT_FOLDER
    extension: str = DEFAULT_EXTENSION
    minimum_severity: Severity = Severity.VERBOSE
    rolling_interval: RollingInterval = RollingInterval.HOUR
    output_template: str = DEFAULT_OUTPUT_TEMPLATE

    @field_validator("minimum_severity", mode="before")
    @classmethod
    def _parse_severity(cls, value):
        return Severity.parse(value)

    @field_validator("extension")
    @classmethod
    def _strip_dot(cls, value: str) -> str:
        return value.lstrip(".")

    def log_path(self, log_id: Optional[str] = None) -> str:
        key = normalize_name(self.name)
        filename = f"log_{key}_.{self.extension}" if log_id is None else f"log_{key}_{log_id}_.{self.extension}"
        return str(Path(self.root) / self.folder / filename)
