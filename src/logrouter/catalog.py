"""
Built-in log types.

The policy of each category is a design table: exception and failure
categories roll every minute so incidents stay isolated in small files,
while routine categories roll hourly.
"""

from __future__ import annotations

from .constants import DEFAULT_EXTENSION, DEFAULT_ROOT_FOLDER
from .types import LogCategory, LogType, LogTypeDescriptor, RollingInterval, Severity

# category -> (folder, severity floor, rotation)
_DESIGN_TABLE: dict[LogCategory, tuple[str, Severity, RollingInterval]] = {
    LogCategory.DEFAULT: ("default", Severity.VERBOSE, RollingInterval.HOUR),
    LogCategory.STARTUP: ("startup", Severity.INFORMATION, RollingInterval.HOUR),
    LogCategory.STARTUP_EXCEPTION: ("startup/exceptions", Severity.FATAL, RollingInterval.MINUTE),
    LogCategory.TRACE_LOG: ("tracelogs", Severity.INFORMATION, RollingInterval.HOUR),
    LogCategory.TRACE_LOG_EXCEPTION: ("tracelogs/exceptions", Severity.ERROR, RollingInterval.MINUTE),
    LogCategory.TRACE_LOG_FAILURE: ("tracelogs/failures", Severity.FATAL, RollingInterval.MINUTE),
    LogCategory.EXCEPTION: ("exceptions", Severity.ERROR, RollingInterval.MINUTE),
    LogCategory.EXCEPTION_DATABASE: ("exceptions/database", Severity.FATAL, RollingInterval.MINUTE),
    LogCategory.EXCEPTION_DATA_TAMPER: ("exceptions/datatamper", Severity.FATAL, RollingInterval.MINUTE),
    LogCategory.EXCEPTION_FAILURE: ("exceptions/failure", Severity.FATAL, RollingInterval.MINUTE),
    LogCategory.FAILURE: ("failures", Severity.FATAL, RollingInterval.MINUTE),
}


class PredefinedCatalog:
    """Fixed table of built-in descriptors keyed by ``LogCategory``."""

    def __init__(self, *, root: str = DEFAULT_ROOT_FOLDER, extension: str = DEFAULT_EXTENSION) -> None:
        self._map: dict[LogCategory, LogType] = {
            category: LogTypeDescriptor(
                name=category.value,
                folder=folder,
                root=root,
                extension=extension,
                minimum_severity=severity,
                rolling_interval=interval,
            )
            for category, (folder, severity, interval) in _DESIGN_TABLE.items()
        }

    def get(self, category: LogCategory) -> LogType:
        """Descriptor for ``category``; unmapped values fall back to Default."""
        return self._map.get(category, self._map[LogCategory.DEFAULT])

    def get_all(self) -> list[tuple[str, LogType]]:
        return [(category.value, log_type) for category, log_type in self._map.items()]

    def __len__(self) -> int:
        return len(self._map)
