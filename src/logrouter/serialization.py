"""
Exception serialization.

An exception becomes an indented JSON object of text fields. Its cause
(``__cause__``, or ``__context__`` when not suppressed) is serialized the
same way and embedded as a string under ``InnerException``, so every link
of the chain stays attributed to the exception that wrapped it.
"""

from __future__ import annotations

import traceback
from typing import Any, Optional

import orjson

from .constants import DEFAULT_MAX_EXCEPTION_DEPTH
from .logging import get_logger

logger = get_logger("logrouter.serialization")

CAUSE_FIELD = "InnerException"


def _text(value: Any) -> str:
    if value is None:
        return ""
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def _type_name(exc: BaseException) -> str:
    cls = type(exc)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def cause_of(exc: BaseException) -> Optional[BaseException]:
    """The exception ``exc`` was raised from, if any."""
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__


class ExceptionSerializer:
    """Render exceptions, including their cause chain, as structured text."""

    def __init__(self, *, max_depth: int = DEFAULT_MAX_EXCEPTION_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.max_depth = max_depth

    def serialize(self, exc: BaseException) -> str:
        return self._dumps(self.to_fields(exc))

    def to_fields(self, exc: BaseException, *, _depth: int = 1, _seen: frozenset[int] = frozenset()) -> dict[str, str]:
        seen = _seen | {id(exc)}
        fields = {
            "Type": _type_name(exc),
            "Message": _text(exc),
            "Args": _text(exc.args),
            "StackTrace": "".join(traceback.format_tb(exc.__traceback__)) if exc.__traceback__ else "",
            "Notes": "\n".join(_text(note) for note in getattr(exc, "__notes__", ())),
        }
        for attr, value in sorted(getattr(exc, "__dict__", {}).items()):
            if attr.startswith("_") or attr in fields or attr == CAUSE_FIELD:
                continue
            fields[attr] = _text(value)

        cause = cause_of(exc)
        if cause is None:
            fields[CAUSE_FIELD] = ""
        elif id(cause) in seen:
            fields[CAUSE_FIELD] = f"<cyclic cause: {_type_name(cause)}>"
        elif _depth >= self.max_depth:
            logger.warning("cause chain truncated", max_depth=self.max_depth, exception=_type_name(exc))
            fields[CAUSE_FIELD] = f"<cause chain truncated at depth {self.max_depth}: {_type_name(cause)}>"
        else:
            fields[CAUSE_FIELD] = self._dumps(self.to_fields(cause, _depth=_depth + 1, _seen=seen))
        return fields

    @staticmethod
    def _dumps(fields: dict[str, str]) -> str:
        return orjson.dumps(fields, option=orjson.OPT_INDENT_2).decode()
