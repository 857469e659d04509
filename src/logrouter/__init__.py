"""
logrouter: route log entries to per-type rolling files.

    from logrouter import LogCategory, LogDispatcher

    async with LogDispatcher.from_settings() as dispatcher:
        await dispatcher.log(LogCategory.STARTUP, "service starting")
"""

from .cache import SinkCache
from .catalog import PredefinedCatalog
from .dispatcher import LogDispatcher, get_dispatcher, reset_dispatcher
from .exceptions import ConfigurationNotFoundError, LogRouterError, UnsupportedSelectorError
from .registry import TypeRegistry
from .serialization import ExceptionSerializer
from .types import LogCategory, LogType, LogTypeDescriptor, RollingInterval, Severity
from .writer import RollingFileSink, TypeWriter

__all__ = [
    "ConfigurationNotFoundError",
    "ExceptionSerializer",
    "LogCategory",
    "LogDispatcher",
    "LogRouterError",
    "LogType",
    "LogTypeDescriptor",
    "PredefinedCatalog",
    "RollingFileSink",
    "RollingInterval",
    "Severity",
    "SinkCache",
    "TypeRegistry",
    "TypeWriter",
    "UnsupportedSelectorError",
    "get_dispatcher",
    "reset_dispatcher",
]
