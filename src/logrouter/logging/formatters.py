"""
Console formatter for diagnostics.
"""

from __future__ import annotations

from datetime import datetime, timezone

from structlog.typing import EventDict

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "timestamp": "\033[90m",
    "logger": "\033[35m",
    "key": "\033[34m",
}

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[1;31m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    code = COLORS.get(color) or LEVEL_COLORS.get(color, "")
    if not code:
        return text
    return f"{code}{text}{COLORS['reset']}"


class ConsoleFormatter:
    """Aligned, optionally colored, single-line rendering of an event dict."""

    EXCLUDED_KEYS = {"level", "message", "event", "logger", "timestamp", "_name"}
    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
    TIMESTAMP_WIDTH = 19
    LEVEL_WIDTH = 8
    LOGGER_WIDTH = 32
    SEPARATOR = " | "

    @classmethod
    def configure(
        cls,
        *,
        timestamp_format: str | None = None,
        level_width: int | None = None,
        logger_width: int | None = None,
        separator: str | None = None,
    ) -> None:
        """Configure alignment and rendering parameters."""
        if timestamp_format:
            cls.TIMESTAMP_FORMAT = timestamp_format
            cls.TIMESTAMP_WIDTH = len(datetime.now().strftime(timestamp_format))
        if level_width:
            cls.LEVEL_WIDTH = level_width
        if logger_width:
            cls.LOGGER_WIDTH = logger_width
        if separator is not None:
            cls.SEPARATOR = separator

    @staticmethod
    def fit_right(text: str, width: int) -> str:
        """Right-align ``text`` in ``width`` columns, eliding from the left."""
        if width <= 0:
            return text
        if len(text) > width:
            text = text[-width:] if width <= 3 else "..." + text[-(width - 3) :]
        return f"{text:>{width}}"

    @classmethod
    def format_timestamp(cls, raw_timestamp: str | None) -> str:
        if raw_timestamp:
            try:
                dt = datetime.fromisoformat(raw_timestamp.replace("Z", "+00:00"))
                if dt.tzinfo is None:
                    dt = dt.replace(tzinfo=timezone.utc)
                return dt.astimezone().strftime(cls.TIMESTAMP_FORMAT)
            except (ValueError, TypeError):
                pass
        return datetime.now().strftime(cls.TIMESTAMP_FORMAT)

    @classmethod
    def format(cls, event_dict: EventDict, *, use_color: bool = True) -> str:
        """Format an event dict into an aligned string."""
        paint = colorize if use_color else (lambda text, _color: text)

        level = str(event_dict.get("level", "info")).upper()
        message = str(event_dict.get("message", event_dict.get("event", "")))
        extras = [
            f"{paint(key, 'key')}={paint(str(value), 'dim')}"
            for key, value in event_dict.items()
            if key not in cls.EXCLUDED_KEYS
        ]
        if extras:
            message = f"{message} " + " ".join(extras)

        return cls.SEPARATOR.join(
            [
                paint(cls.fit_right(cls.format_timestamp(event_dict.get("timestamp")), cls.TIMESTAMP_WIDTH), "timestamp"),
                paint(cls.fit_right(level, cls.LEVEL_WIDTH), level),
                paint(cls.fit_right(str(event_dict.get("logger", "logrouter")), cls.LOGGER_WIDTH), "logger"),
                message,
            ]
        )
