"""
Diagnostics sink abstractions and concrete implementations.
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Literal

import orjson
from structlog.typing import EventDict

from .formatters import ConsoleFormatter

LogFormat = Literal["console", "json"]
SINK_NAMES = ("stdio", "file")


def orjson_dumps(v: Any, *, default: Any = str) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for diagnostics sinks."""

    @abstractmethod
    def emit(self, event_dict: EventDict) -> None:
        """Emit a log event to the sink."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class StdioSink(BaseSink):
    """Standard I/O sink with configurable format.

    Args:
        fmt: Output format - "console" (colored human-readable) or "json"
        stream: Output stream (default: stderr)
    """

    def __init__(self, fmt: LogFormat = "console", stream: Any = None):
        self._fmt = fmt
        self._stream = stream or sys.stderr

    def emit(self, event_dict: EventDict) -> None:
        if self._fmt == "json":
            output = orjson_dumps(event_dict)
        else:
            use_color = bool(getattr(self._stream, "isatty", lambda: False)())
            output = ConsoleFormatter.format(event_dict, use_color=use_color)

        self._stream.write(output + "\n")
        self._stream.flush()

    def close(self) -> None:
        pass


class FileSink(BaseSink):
    """Local file sink with size-based rotation (JSON lines).

    ``logrouter.log`` rotates to ``logrouter.1.log``, ``logrouter.2.log``, ...
    keeping at most ``backup_count`` old files.
    """

    def __init__(self, path: str | Path, max_bytes: int = 10 * 1024 * 1024, backup_count: int = 5):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._max_bytes = max_bytes
        self._backup_count = backup_count
        self._lock = threading.Lock()
        self._file = open(self._path, "a", encoding="utf-8")

    @property
    def path(self) -> Path:
        return self._path

    def backup_path(self, index: int) -> Path:
        return self._path.with_suffix(f".{index}{self._path.suffix}")

    def emit(self, event_dict: EventDict) -> None:
        json_str = orjson_dumps(event_dict)
        with self._lock:
            self._file.write(json_str + "\n")
            self._file.flush()
            self._maybe_rotate()

    def _maybe_rotate(self) -> None:
        if self._path.stat().st_size <= self._max_bytes:
            return
        self._file.close()
        oldest = self.backup_path(self._backup_count)
        if oldest.exists():
            oldest.unlink()
        for i in range(self._backup_count - 1, 0, -1):
            src = self.backup_path(i)
            if src.exists():
                src.rename(self.backup_path(i + 1))
        self._path.rename(self.backup_path(1))
        self._file = open(self._path, "a", encoding="utf-8")

    def close(self) -> None:
        with self._lock:
            self._file.close()
