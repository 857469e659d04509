"""
Core logging configuration and initialization logic.
"""

from __future__ import annotations

import logging
import sys
import threading
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import structlog
from structlog.typing import EventDict, WrappedLogger

from .formatters import ConsoleFormatter
from .sinks import BaseSink, FileSink, LogFormat, StdioSink

if TYPE_CHECKING:
    from logrouter.config import LoggingSettings

# =============================================================================
# Global State
# =============================================================================

_sinks: list[BaseSink] = []
_sinks_lock = threading.Lock()


class LibraryLogger:
    """
    Logger handed out by ``get_logger``.

    Follows structlog's configuration once the host application or
    ``configure_logging()`` installed one. Until then only warnings and
    above are shown, on standard error, so an unconfigured host's stdout
    stays clean.
    """

    def __init__(self, name: str):
        self._name = name

    def _target(self) -> Any:
        if structlog.is_configured():
            return structlog.get_logger(_name=self._name)
        return structlog.wrap_logger(
            structlog.PrintLogger(sys.stderr),
            processors=[
                structlog.processors.add_log_level,
                add_timestamp,
                add_logger_name,
                structlog.dev.ConsoleRenderer(colors=False),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
            context_class=dict,
        ).bind(_name=self._name)

    def __getattr__(self, attr: str) -> Any:
        return getattr(self._target(), attr)


def get_logger(name: str | None = None) -> LibraryLogger:
    """Get a structured logger instance."""
    return LibraryLogger(name or "logrouter")


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.pop("_name", "logrouter")
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'message'."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def multi_sink_renderer(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
    """Render log to all configured sinks. Returns empty to suppress default output."""
    for sink in list(_sinks):
        try:
            sink.emit(event_dict)
        except Exception:
            pass  # Diagnostics must not break the caller
    return ""


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


class SilentPrintLoggerFactory:
    """Logger factory that returns a logger writing to nowhere."""

    _file = _NopFile()

    def __call__(self, *args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=self._file)


# =============================================================================
# Configuration Logic
# =============================================================================


def _initialize_sinks(sinks: str, fmt: str, file_path: str, max_bytes: int, backup_count: int) -> list[BaseSink]:
    """Close existing sinks and create the requested ones."""
    log_format: LogFormat = "json" if fmt.lower() == "json" else "console"

    created: list[BaseSink] = []
    for name in (s.strip().lower() for s in sinks.split(",")):
        if name == "stdio":
            created.append(StdioSink(fmt=log_format, stream=sys.stderr))
        elif name == "file":
            created.append(FileSink(file_path, max_bytes=max_bytes, backup_count=backup_count))
        elif name:
            raise ValueError(f"Unknown log sink '{name}'")

    with _sinks_lock:
        for sink in _sinks:
            sink.close()
        _sinks[:] = created
    return created


def _configure_structlog(level: str) -> None:
    """Configure structlog processors and factory."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            add_timestamp,
            add_logger_name,
            rename_event_key,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            multi_sink_renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=SilentPrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_logging(
    *,
    level: str = "WARNING",
    sinks: str = "stdio",
    fmt: str = "console",
    file_path: str = "logs/logrouter.log",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> list[BaseSink]:
    """
    Configure logrouter diagnostics.

    Until this is called, diagnostics follow whatever structlog
    configuration the host application installed.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        sinks: Comma-separated sink names (stdio, file)
        fmt: Output format for stdio sink (console, json)
        file_path: Path for file sink
        max_bytes: Size at which the file sink rotates
        backup_count: Rotated files kept by the file sink

    Returns:
        The active sinks.
    """
    created = _initialize_sinks(sinks, fmt, file_path, max_bytes, backup_count)
    _configure_structlog(level)
    return created


def configure_from_settings(config: "LoggingSettings | None" = None) -> list[BaseSink]:
    """Configure diagnostics from `LoggingSettings` (defaults to `settings.logging`)."""
    if config is None:
        from logrouter.config import settings

        config = settings.logging

    ConsoleFormatter.configure(
        timestamp_format=config.console_timestamp_format,
        level_width=config.console_level_width,
        logger_width=config.console_logger_width,
        separator=config.console_separator,
    )
    return configure_logging(
        level=config.level.value,
        sinks=config.sinks,
        fmt=config.format,
        file_path=config.file_path,
        max_bytes=config.file_max_bytes,
        backup_count=config.file_backup_count,
    )


def shutdown_logging() -> None:
    """Close every diagnostics sink and restore structlog defaults."""
    with _sinks_lock:
        for sink in _sinks:
            sink.close()
        _sinks.clear()
    structlog.reset_defaults()
