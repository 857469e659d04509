"""
Payload rendering and entry framing.

Nothing in this module raises for odd payloads: whatever the caller hands
over ends up as text.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import orjson
from pydantic import BaseModel

from .constants import FRAME_TIMESTAMP_FORMAT, NO_LOG_DATA_MESSAGE

_FRAME_OPEN = ("-----", "----------", "---------------")
_FRAME_CLOSE = tuple(reversed(_FRAME_OPEN))
_SECTION = "-----"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_now() -> datetime:
    return datetime.now().astimezone()


def format_timestamp(moment: datetime) -> str:
    """``YYYY-MM-DD HH:MM:SS.mmm +HH:MM``"""
    offset = moment.strftime("%z")
    if offset:
        offset = f" {offset[:3]}:{offset[3:5]}"
    return f"{moment:%Y-%m-%d %H:%M:%S}.{moment.microsecond // 1000:03d}{offset}"


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (set, frozenset)):
        return list(value)
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return str(value)


def render_payload(payload: Any) -> str:
    """Turn a payload into the text body of an entry."""
    if payload is None:
        return NO_LOG_DATA_MESSAGE
    if isinstance(payload, str):
        return payload or NO_LOG_DATA_MESSAGE
    if isinstance(payload, bytes):
        return payload.decode("utf-8", errors="replace") or NO_LOG_DATA_MESSAGE
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")
    try:
        return orjson.dumps(
            payload,
            default=_json_default,
            option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS,
        ).decode()
    except TypeError:
        # orjson.JSONEncodeError is a TypeError
        try:
            return repr(payload)
        except Exception:
            return f"<unprintable {type(payload).__name__}>"


def frame_entry(name: str, content: str, moment: datetime) -> str:
    """Wrap ``content`` in the Start/End banner of log type ``name``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc).strftime(FRAME_TIMESTAMP_FORMAT)
    local = moment.astimezone().strftime(FRAME_TIMESTAMP_FORMAT)
    return "\n".join(
        [
            "",
            *_FRAME_OPEN,
            f"Start of {name} Log at utc: {utc}, local: {local}",
            _SECTION,
            content,
            _SECTION,
            f"End of {name} Log at utc: {utc}, local: {local}",
            *_FRAME_CLOSE,
        ]
    )
