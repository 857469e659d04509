"""
Error hierarchy for log-type routing.

Only resolution errors are raised by the router itself. Failures inside a
background write belong to the sink and reach the caller through the future
returned by the dispatcher, unchanged.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class LogRouterError(Exception):
    """Root of all logrouter errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationNotFoundError(LogRouterError, KeyError):
    """Raised when a log type name has never been registered."""

    def __init__(self, *, name: str) -> None:
        super().__init__(
            f"Log type '{name}' is not registered.",
            code="LOG_TYPE_NOT_FOUND",
            details={"name": name},
        )
        self.name = name

    def __str__(self) -> str:
        # KeyError would repr() the message otherwise
        return self.args[0]


class UnsupportedSelectorError(LogRouterError, TypeError):
    """Raised when a selector is neither a category, a name nor a log type."""

    def __init__(self, *, selector: Any) -> None:
        super().__init__(
            f"Cannot resolve a log type from {type(selector).__name__!s} selector",
            code="UNSUPPORTED_SELECTOR",
            details={"selector_type": type(selector).__name__},
        )
