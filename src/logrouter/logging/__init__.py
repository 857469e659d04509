"""
logrouter diagnostics logging.

How logrouter reports on itself, as opposed to the entries it routes:
- stdio: standard error (console/json format)
- file: local JSON lines with size rotation

Design Pattern: Strategy Pattern for sink abstraction.
Library: structlog + orjson for JSON serialization.
"""

from .core import configure_from_settings, configure_logging, get_logger, shutdown_logging

__all__ = ["configure_logging", "configure_from_settings", "get_logger", "shutdown_logging"]
