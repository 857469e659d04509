"""
SinkCache: lazily built writers, one per log type name.

Writers for built-in categories and writers for named types live in
separate scopes, so a category keeps its catalog policy even when a type of
the same name is registered with different settings.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future
from typing import Callable, Optional

from .logging import get_logger
from .types import LogType, normalize_name
from .writer import TypeWriter

logger = get_logger("logrouter.cache")

WriterFactory = Callable[[LogType, Optional[str]], TypeWriter]
CacheKey = tuple[str, str, Optional[str]]

CATALOG_SCOPE = "catalog"
NAMED_SCOPE = "named"


def _default_factory(log_type: LogType, log_id: Optional[str]) -> TypeWriter:
    return TypeWriter(log_type, log_id=log_id)


def cache_key(name: str, log_id: Optional[str] = None, *, scope: str = NAMED_SCOPE) -> CacheKey:
    return (scope, normalize_name(name), log_id)


class SinkCache:
    """
    Get-or-create cache of ``TypeWriter`` instances.

    The first caller for a key installs a pending future under the lock and
    builds the writer outside of it; concurrent callers for the same key
    wait on that future instead of building their own. Exactly one writer
    is constructed per key. If construction fails the slot is released and
    the error re-raised to every waiter.
    """

    def __init__(self, factory: Optional[WriterFactory] = None) -> None:
        self._factory = factory or _default_factory
        self._lock = threading.Lock()
        self._slots: dict[CacheKey, Future[TypeWriter]] = {}
        self._retired: list[TypeWriter] = []
        self._closed = False

    def get_or_create(
        self, log_type: LogType, log_id: Optional[str] = None, *, scope: str = NAMED_SCOPE
    ) -> TypeWriter:
        key = cache_key(log_type.name, log_id, scope=scope)
        with self._lock:
            if self._closed:
                raise RuntimeError("SinkCache is closed")
            slot = self._slots.get(key)
            owner = slot is None
            if owner:
                slot = self._slots[key] = Future()

        if owner:
            try:
                writer = self._factory(log_type, log_id)
            except BaseException as exc:
                with self._lock:
                    if self._slots.get(key) is slot:
                        del self._slots[key]
                slot.set_exception(exc)
                raise
            slot.set_result(writer)
            logger.debug("writer created", scope=scope, log_type=key[1], log_id=log_id, path=writer.path)
            return writer

        return slot.result()

    def evict(self, name: str) -> int:
        """
        Drop every named writer cached for ``name`` (including per-instance ones).

        Catalog writers are never evicted. Evicted writers are kept aside and
        closed by ``close()``: callers that already hold one may still be
        writing through it.
        """
        target = normalize_name(name)
        with self._lock:
            keys = [key for key in self._slots if key[0] == NAMED_SCOPE and key[1] == target]
            slots = [self._slots.pop(key) for key in keys]
        for slot in slots:
            slot.add_done_callback(self._retire)
        if slots:
            logger.debug("writers evicted", log_type=target, count=len(slots))
        return len(slots)

    def _retire(self, slot: Future[TypeWriter]) -> None:
        if slot.exception() is not None:
            return
        with self._lock:
            if not self._closed:
                self._retired.append(slot.result())
                return
        # built after close(); nothing else will release it
        slot.result().close()

    @staticmethod
    def _close_slot(slot: Future[TypeWriter]) -> None:
        if slot.exception() is None:
            slot.result().close()

    def close(self) -> None:
        """Close live and retired writers. The cache is empty and rejects new writers afterwards."""
        with self._lock:
            self._closed = True
            slots = list(self._slots.values())
            self._slots.clear()
            retired, self._retired = self._retired, []
        for writer in retired:
            writer.close()
        for slot in slots:
            slot.add_done_callback(self._close_slot)

    @property
    def closed(self) -> bool:
        return self._closed

    def __contains__(self, name: str) -> bool:
        return cache_key(name) in self._slots

    def __len__(self) -> int:
        return len(self._slots)
