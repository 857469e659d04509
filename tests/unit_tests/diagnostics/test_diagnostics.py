"""
内部诊断日志单元测试
"""

from __future__ import annotations

import io

import orjson
import pytest

from logrouter import LogCategory, LogDispatcher, LogTypeDescriptor, PredefinedCatalog
from logrouter.config import LoggingSettings
from logrouter.logging import configure_from_settings, configure_logging, get_logger, shutdown_logging
from logrouter.logging.formatters import ConsoleFormatter
from logrouter.logging.sinks import FileSink, StdioSink


def _lines(path):
    return [orjson.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_file_sink_receives_structured_events(tmp_path):
    log_file = tmp_path / "diag" / "logrouter.log"
    configure_logging(level="DEBUG", sinks="file", file_path=str(log_file))
    try:
        get_logger("logrouter.test").info("hello", answer=42)
    finally:
        shutdown_logging()

    [event] = _lines(log_file)
    assert event["message"] == "hello"
    assert event["answer"] == 42
    assert event["level"] == "info"
    assert event["logger"] == "logrouter.test"
    assert event["timestamp"].endswith("+00:00")


def test_level_filtering(tmp_path):
    log_file = tmp_path / "logrouter.log"
    configure_logging(level="WARNING", sinks="file", file_path=str(log_file))
    try:
        logger = get_logger("logrouter.test")
        logger.debug("hidden")
        logger.warning("shown")
    finally:
        shutdown_logging()

    assert [event["message"] for event in _lines(log_file)] == ["shown"]


def test_dispatcher_lifecycle_is_reported(tmp_path):
    """注册、创建 writer、关闭等生命周期事件写入诊断日志"""
    log_file = tmp_path / "logrouter.log"
    configure_logging(level="DEBUG", sinks="file", file_path=str(log_file))
    dispatcher = LogDispatcher(catalog=PredefinedCatalog(root=str(tmp_path / "app-logs")))
    try:
        dispatcher.register(LogTypeDescriptor(name="Audit", root=str(tmp_path / "app-logs")))
        dispatcher.submit(LogCategory.STARTUP, "up").result(timeout=5)
    finally:
        dispatcher.close()
        shutdown_logging()

    messages = [event["message"] for event in _lines(log_file)]
    assert "log type registered" in messages
    assert "writer created" in messages
    assert "dispatcher closed" in messages


def test_configure_from_settings(tmp_path):
    log_file = tmp_path / "from-settings.log"
    config = LoggingSettings(level="ERROR", sinks="file", file_path=str(log_file), console_level_width=6)
    sinks = configure_from_settings(config)
    try:
        assert len(sinks) == 1 and isinstance(sinks[0], FileSink)
        assert ConsoleFormatter.LEVEL_WIDTH == 6
        get_logger().error("failure")
    finally:
        shutdown_logging()
        ConsoleFormatter.configure(level_width=8)

    [event] = _lines(log_file)
    assert event["logger"] == "logrouter"


def test_unknown_sink_is_rejected():
    with pytest.raises(ValueError):
        configure_logging(sinks="stdio,carrier-pigeon")


def test_stdio_sink_json_and_console():
    stream = io.StringIO()
    StdioSink(fmt="json", stream=stream).emit({"message": "m", "level": "info"})
    assert orjson.loads(stream.getvalue()) == {"message": "m", "level": "info"}

    stream = io.StringIO()
    StdioSink(fmt="console", stream=stream).emit(
        {"message": "m", "level": "warning", "logger": "logrouter.cache", "timestamp": "2026-10-19T12:00:00+00:00", "key": 1}
    )
    line = stream.getvalue()
    assert "\x1b[" not in line  # StringIO is not a tty
    assert " WARNING | " in line
    assert line.rstrip().endswith("m key=1")


def test_console_formatter_fit_right():
    assert ConsoleFormatter.fit_right("abc", 5) == "  abc"
    assert ConsoleFormatter.fit_right("logrouter.dispatcher", 10) == "...patcher"


def test_file_sink_rotates(tmp_path):
    sink = FileSink(tmp_path / "diag.log", max_bytes=64, backup_count=2)
    for index in range(10):
        sink.emit({"message": f"event-{index:02d}", "padding": "x" * 40})
    sink.close()

    assert sink.path.exists()
    assert sink.backup_path(1).exists()
    assert sink.backup_path(2).exists()
    assert not sink.backup_path(3).exists()
    assert sink.backup_path(1).name == "diag.1.log"


def test_unconfigured_diagnostics_stay_off_stdout(tmp_path, capsys):
    """宿主未配置 structlog 时，调试事件不输出，警告只写入 stderr"""
    dispatcher = LogDispatcher(catalog=PredefinedCatalog(root=str(tmp_path / "app-logs")))
    try:
        dispatcher.submit(LogCategory.STARTUP, "up").result(timeout=5)
    finally:
        dispatcher.close()
    get_logger("logrouter.test").warning("attention", answer=42)

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "writer created" not in captured.err
    assert "dispatcher closed" not in captured.err
    assert "attention" in captured.err
    assert "answer=42" in captured.err
