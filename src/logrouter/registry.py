"""
TypeRegistry: name -> log type mapping shared by every dispatcher call.
"""

from __future__ import annotations

import threading
from typing import Optional

from .catalog import PredefinedCatalog
from .exceptions import ConfigurationNotFoundError
from .logging import get_logger
from .types import LogType, normalize_name

logger = get_logger("logrouter.registry")


class TypeRegistry:
    """
    Thread-safe registry of log types keyed by lower-cased name.

    The built-in catalog is copied in by the constructor, so every
    registry handed out already knows the predefined types. Later
    registrations under the same name replace the previous entry.
    """

    def __init__(self, catalog: Optional[PredefinedCatalog] = None) -> None:
        self._lock = threading.Lock()
        self._types: dict[str, LogType] = {}
        for name, log_type in (catalog or PredefinedCatalog()).get_all():
            self._types[normalize_name(name)] = log_type

    def register(self, log_type: LogType) -> None:
        self.register_pair(log_type.name, log_type)

    def register_pair(self, name: str, log_type: LogType) -> None:
        key = normalize_name(name)
        with self._lock:
            replaced = key in self._types
            self._types[key] = log_type
        logger.debug("log type registered", log_type=key, replaced=replaced)

    def get(self, name: str) -> LogType:
        try:
            return self._types[normalize_name(name)]
        except KeyError:
            raise ConfigurationNotFoundError(name=name) from None

    def get_all(self) -> list[LogType]:
        with self._lock:
            return list(self._types.values())

    def contains(self, name: str) -> bool:
        return normalize_name(name) in self._types

    __contains__ = contains

    def __len__(self) -> int:
        return len(self._types)
