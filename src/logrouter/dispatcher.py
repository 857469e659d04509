"""
LogDispatcher: the public entry point.

Usage:
    dispatcher = LogDispatcher.from_settings()

    await dispatcher.log(LogCategory.STARTUP, "service starting")
    await dispatcher.log("Audit", {"user": "alice", "action": "login"})
    await dispatcher.log_exception(LogCategory.EXCEPTION, exc)

    # from plain threads
    dispatcher.submit(LogCategory.TRACE_LOG, "tick").result()

A selector is a ``LogCategory`` (looked up in the built-in catalog), a
name (looked up in the registry) or a ``LogType`` used as is. Unknown names
raise ``ConfigurationNotFoundError`` before anything is written.
"""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Optional, Union

from .cache import CATALOG_SCOPE, NAMED_SCOPE, SinkCache, WriterFactory
from .catalog import PredefinedCatalog
from .constants import DEFAULT_MAX_EXCEPTION_DEPTH, DEFAULT_MAX_WORKERS
from .exceptions import UnsupportedSelectorError
from .formatting import frame_entry, render_payload, utc_now
from .logging import get_logger
from .registry import TypeRegistry
from .serialization import ExceptionSerializer
from .types import LogCategory, LogType, Severity

if TYPE_CHECKING:
    from .config import Settings

logger = get_logger("logrouter.dispatcher")

Selector = Union[LogCategory, str, LogType]


class LogDispatcher:
    """
    Routes payloads to per-type writers.

    Owns the type registry, the writer cache and a bounded worker pool.
    Writes run on the pool; ``log``/``submit`` return as soon as the entry
    is queued, and the returned future resolves once the writer has taken
    it (``True``) or the entry was below the global floor (``False``).
    Sink errors are delivered through that future and never retried.
    """

    def __init__(
        self,
        *,
        catalog: Optional[PredefinedCatalog] = None,
        registry: Optional[TypeRegistry] = None,
        cache: Optional[SinkCache] = None,
        serializer: Optional[ExceptionSerializer] = None,
        writer_factory: Optional[WriterFactory] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        minimum_severity: Severity = Severity.VERBOSE,
        evict_on_register: bool = True,
    ) -> None:
        self._catalog = catalog or PredefinedCatalog()
        # Seeded before the registry is reachable from outside
        self._registry = registry or TypeRegistry(self._catalog)
        self._cache = cache or SinkCache(writer_factory)
        self._serializer = serializer or ExceptionSerializer(max_depth=DEFAULT_MAX_EXCEPTION_DEPTH)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="logrouter")
        self._minimum_severity = Severity.parse(minimum_severity)
        self._evict_on_register = evict_on_register
        self._closed = False
        self._close_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Optional["Settings"] = None, **overrides: Any) -> "LogDispatcher":
        if settings is None:
            from .config import settings

        router = settings.router
        kwargs: dict[str, Any] = {
            "catalog": PredefinedCatalog(root=router.root_folder, extension=router.file_extension),
            "serializer": ExceptionSerializer(max_depth=router.max_exception_depth),
            "max_workers": router.max_workers,
            "minimum_severity": router.minimum_severity,
            "evict_on_register": router.evict_on_register,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    # =========================================================================
    # Registry
    # =========================================================================

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @property
    def cache(self) -> SinkCache:
        return self._cache

    def register(self, log_type: LogType) -> None:
        self.register_pair(log_type.name, log_type)

    def register_pair(self, name: str, log_type: LogType) -> None:
        self._registry.register_pair(name, log_type)
        if self._evict_on_register:
            self._cache.evict(name)

    def get(self, name: str) -> LogType:
        return self._registry.get(name)

    def get_all(self) -> list[LogType]:
        return self._registry.get_all()

    def resolve(self, selector: Selector) -> LogType:
        return self._resolve(selector)[0]

    def _resolve(self, selector: Selector) -> tuple[LogType, str]:
        # LogCategory is a str subclass; check it first
        if isinstance(selector, LogCategory):
            return self._catalog.get(selector), CATALOG_SCOPE
        if isinstance(selector, str):
            return self._registry.get(selector), NAMED_SCOPE
        if isinstance(selector, LogType):
            return selector, NAMED_SCOPE
        raise UnsupportedSelectorError(selector=selector)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def submit(self, selector: Selector, payload: Any = None, *, log_id: Optional[str] = None) -> Future[bool]:
        """Queue an entry from any thread. Resolution errors raise here, synchronously."""
        self._ensure_open()
        log_type, scope = self._resolve(selector)
        return self._dispatch(log_type, scope, payload, log_id)

    def submit_exception(
        self, selector: Selector, exc: BaseException, *, log_id: Optional[str] = None
    ) -> Future[bool]:
        self._ensure_open()
        log_type, scope = self._resolve(selector)
        return self._dispatch(log_type, scope, self._serializer.serialize(exc), log_id)

    async def log(self, selector: Selector, payload: Any = None, *, log_id: Optional[str] = None) -> bool:
        return await asyncio.wrap_future(self.submit(selector, payload, log_id=log_id))

    async def log_exception(self, selector: Selector, exc: BaseException, *, log_id: Optional[str] = None) -> bool:
        return await asyncio.wrap_future(self.submit_exception(selector, exc, log_id=log_id))

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("LogDispatcher is closed")

    def _dispatch(self, log_type: LogType, scope: str, payload: Any, log_id: Optional[str]) -> Future[bool]:
        severity = Severity.parse(log_type.minimum_severity)
        if severity < self._minimum_severity:
            logger.debug("entry dropped below floor", log_type=log_type.name, severity=severity.name)
            dropped: Future[bool] = Future()
            dropped.set_result(False)
            return dropped

        text = frame_entry(log_type.name, render_payload(payload), utc_now())
        writer = self._cache.get_or_create(log_type, log_id, scope=scope)
        return self._executor.submit(self._write, writer, severity, text)

    @staticmethod
    def _write(writer, severity: Severity, text: str) -> bool:
        writer.write(severity, text)
        return True

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self, wait: bool = True) -> None:
        """Stop accepting entries, drain the pool and close every writer."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=wait)
        self._cache.close()
        logger.debug("dispatcher closed")

    def __enter__(self) -> "LogDispatcher":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> "LogDispatcher":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await asyncio.to_thread(self.close)


# =============================================================================
# Application-scoped instance
# =============================================================================

_dispatcher: Optional[LogDispatcher] = None
_dispatcher_lock = threading.Lock()


def get_dispatcher() -> LogDispatcher:
    """Process-wide dispatcher built from ``settings`` on first use."""
    global _dispatcher
    with _dispatcher_lock:
        if _dispatcher is None:
            _dispatcher = LogDispatcher.from_settings()
        return _dispatcher


def reset_dispatcher() -> None:
    """Close and forget the process-wide dispatcher."""
    global _dispatcher
    with _dispatcher_lock:
        dispatcher, _dispatcher = _dispatcher, None
    if dispatcher is not None:
        dispatcher.close()
