"""
Payload 渲染与日志框架格式单元测试
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import orjson
import pytest
from pydantic import BaseModel

from logrouter.constants import NO_LOG_DATA_MESSAGE
from logrouter.formatting import format_timestamp, frame_entry, render_payload
from logrouter.types import Severity

MOMENT = datetime(2026, 10, 19, 12, 30, 15, 987654, tzinfo=timezone.utc)


class Order(BaseModel):
    id: int
    status: str


@dataclass
class Point:
    x: int
    y: int


class TestRenderPayload:
    @pytest.mark.parametrize("payload", [None, "", b""])
    def test_missing_payload_becomes_placeholder(self, payload) -> None:
        assert render_payload(payload) == NO_LOG_DATA_MESSAGE

    def test_strings_pass_through(self) -> None:
        assert render_payload("service starting") == "service starting"

    def test_mapping_is_indented_json(self) -> None:
        text = render_payload({"user": "alice", "attempts": 3})
        assert text == '{\n  "user": "alice",\n  "attempts": 3\n}'

    def test_pydantic_model(self) -> None:
        assert orjson.loads(render_payload(Order(id=1, status="paid"))) == {"id": 1, "status": "paid"}

    def test_dataclass_and_nested_values(self) -> None:
        payload = {
            "point": Point(1, 2),
            "id": UUID("12345678-1234-5678-1234-567812345678"),
            "tags": {"a"},
            "level": Severity.ERROR,
            1: "int key",
        }
        data = orjson.loads(render_payload(payload))
        assert data["point"] == {"x": 1, "y": 2}
        assert data["id"] == "12345678-1234-5678-1234-567812345678"
        assert data["tags"] == ["a"]
        assert data["level"] == 4
        assert data["1"] == "int key"

    def test_arbitrary_objects_use_their_text(self) -> None:
        class Opaque:
            def __str__(self) -> str:
                return "opaque-thing"

        assert render_payload({"value": Opaque()}) == '{\n  "value": "opaque-thing"\n}'

    def test_unserializable_falls_back_to_repr(self) -> None:
        huge = 2**80  # beyond orjson's integer range
        assert render_payload([huge]) == repr([huge])


def test_format_timestamp_has_milliseconds_and_offset() -> None:
    assert format_timestamp(MOMENT) == "2026-10-19 12:30:15.987 +00:00"
    shifted = MOMENT.astimezone(timezone(timedelta(hours=3, minutes=30)))
    assert format_timestamp(shifted) == "2026-10-19 16:00:15.987 +03:30"


def test_frame_entry_layout() -> None:
    text = frame_entry("Startup", "service starting", MOMENT)
    lines = text.split("\n")

    assert lines[0] == ""
    assert lines[1:4] == ["-----", "----------", "---------------"]
    assert re.fullmatch(
        r"Start of Startup Log at utc: 2026/10/19 12:30:15 \+0000, local: \d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2} [+-]\d{4}",
        lines[4],
    )
    assert lines[5] == "-----"
    assert lines[6] == "service starting"
    assert lines[7] == "-----"
    assert lines[8] == lines[4].replace("Start of", "End of", 1)
    assert lines[9:] == ["---------------", "----------", "-----"]


def test_frame_entry_treats_naive_time_as_utc() -> None:
    naive = MOMENT.replace(tzinfo=None)
    assert frame_entry("X", "body", naive) == frame_entry("X", "body", MOMENT)
