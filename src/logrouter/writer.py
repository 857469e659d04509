"""
Per-type writers.

A ``TypeWriter`` is a structlog logger whose processor chain renders the
log type's output template, wrapped around a ``RollingFileSink`` that owns
the file on disk. The writer's own gate is fully open: what gets written is
decided by the dispatcher, not here.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import IO, Callable, Optional

import structlog
from structlog.typing import EventDict, WrappedLogger

from .constants import DEFAULT_OUTPUT_TEMPLATE
from .formatting import format_timestamp, local_now
from .types import LogType, RollingInterval, Severity

Clock = Callable[[], datetime]

_SEVERITY_BY_METHOD = {
    "debug": Severity.DEBUG,
    "info": Severity.INFORMATION,
    "warning": Severity.WARNING,
    "error": Severity.ERROR,
    "critical": Severity.FATAL,
}


# =============================================================================
# Sink
# =============================================================================


class RollingFileSink:
    """
    Append-only text file that rolls over with the clock.

    ``log_startup_.md`` with an hourly interval becomes
    ``log_startup_2026101912.md``, then ``log_startup_2026101913.md``, ...
    """

    def __init__(self, path: str | Path, interval: RollingInterval, *, clock: Optional[Clock] = None):
        self._template = Path(path)
        self._interval = interval
        self._clock = clock or local_now
        self._lock = threading.Lock()
        self._file: Optional[IO[str]] = None
        self._stamp: Optional[str] = None
        self._current_path: Optional[Path] = None
        self._closed = False

    @property
    def current_path(self) -> Optional[Path]:
        """File receiving writes, or None before the first write."""
        return self._current_path

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def path_for(self, moment: datetime) -> Path:
        stamp = self._interval.stamp(moment)
        return self._template.with_name(f"{self._template.stem}{stamp}{self._template.suffix}")

    def _roll(self, moment: datetime) -> None:
        if self._file is not None:
            self._file.close()
        path = self.path_for(moment)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(path, "a", encoding="utf-8")
        self._current_path = path
        self._stamp = self._interval.stamp(moment)

    def msg(self, message: str) -> None:
        with self._lock:
            if self._closed:
                raise ValueError(f"write to closed sink {self._template}")
            moment = self._clock()
            if self._file is None or self._interval.stamp(moment) != self._stamp:
                self._roll(moment)
            self._file.write(message)
            self._file.flush()

    # structlog calls the wrapped logger by level name
    log = debug = info = warn = warning = error = critical = fatal = exception = msg

    def close(self) -> None:
        """Release the file. Later writes raise ``ValueError``."""
        with self._lock:
            self._closed = True
            if self._file is not None:
                self._file.close()
                self._file = None
                self._stamp = None


# =============================================================================
# Processors
# =============================================================================


def add_severity(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Store the three-letter level used by ``{level}``."""
    severity = event_dict.pop("severity", None)
    if severity is None:
        severity = _SEVERITY_BY_METHOD.get(method_name, Severity.INFORMATION)
    event_dict["level"] = Severity.parse(severity).abbreviation
    return event_dict


class LocalTimestamper:
    """Local timestamp with milliseconds and UTC offset."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or local_now

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["timestamp"] = format_timestamp(self._clock())
        return event_dict


class _Fields(dict):
    def __missing__(self, key: str) -> str:
        return ""


class TemplateRenderer:
    """Final processor: render the event through an output template."""

    def __init__(self, template: str, name: str):
        self._template = template
        self._name = name

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        exception = event_dict.get("exception") or ""
        if exception and not exception.endswith("\n"):
            exception += "\n"
        fields = _Fields(
            timestamp=event_dict.get("timestamp", ""),
            level=event_dict.get("level", ""),
            message=event_dict.get("event", ""),
            exception=exception,
            newline="\n",
            name=self._name,
        )
        try:
            return self._template.format_map(fields)
        except (ValueError, IndexError, AttributeError, TypeError):
            return DEFAULT_OUTPUT_TEMPLATE.format_map(fields)


# =============================================================================
# Writer
# =============================================================================


class TypeWriter:
    """Writer bound to one log type's path, rotation and output template."""

    def __init__(self, log_type: LogType, *, log_id: Optional[str] = None, clock: Optional[Clock] = None):
        self.log_type = log_type
        self.path = log_type.log_path(log_id)
        self._sink = RollingFileSink(self.path, log_type.rolling_interval, clock=clock)
        self._logger = structlog.wrap_logger(
            self._sink,
            processors=[
                add_severity,
                LocalTimestamper(clock),
                structlog.processors.format_exc_info,
                TemplateRenderer(log_type.output_template, log_type.name),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(logging.NOTSET),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    @property
    def sink(self) -> RollingFileSink:
        return self._sink

    def write(self, severity: Severity, message: str) -> None:
        getattr(self._logger, severity.method_name)(message, severity=severity)

    def close(self) -> None:
        self._sink.close()
