"""
TypeRegistry 单元测试

覆盖大小写不敏感查找、替换语义、未注册名称报错以及并发注册。
"""

from __future__ import annotations

import threading

import pytest

from logrouter.exceptions import ConfigurationNotFoundError, LogRouterError
from logrouter.registry import TypeRegistry
from logrouter.types import LogCategory, LogTypeDescriptor, Severity


@pytest.fixture
def registry() -> TypeRegistry:
    return TypeRegistry()


def test_seeded_with_builtin_types(registry) -> None:
    assert len(registry) == len(LogCategory)
    for category in LogCategory:
        assert registry.get(category.value).name == category.value


def test_lookup_is_case_insensitive(registry) -> None:
    audit = LogTypeDescriptor(name="Audit", folder="audit")
    registry.register(audit)
    assert registry.get("audit") is audit
    assert registry.get("AUDIT") is audit
    assert "aUdIt" in registry


def test_register_replaces_existing_entry(registry) -> None:
    first = LogTypeDescriptor(name="Audit", minimum_severity=Severity.INFORMATION)
    second = LogTypeDescriptor(name="AUDIT", minimum_severity=Severity.ERROR)
    registry.register(first)
    registry.register(second)

    assert registry.get("audit") is second
    assert first.minimum_severity is Severity.INFORMATION  # replaced, not mutated
    assert len(registry) == len(LogCategory) + 1


def test_register_is_idempotent(registry) -> None:
    audit = LogTypeDescriptor(name="Audit")
    registry.register(audit)
    registry.register(audit)
    assert registry.get("Audit") is audit
    assert len(registry) == len(LogCategory) + 1


def test_register_pair_uses_given_key(registry) -> None:
    audit = LogTypeDescriptor(name="Audit")
    registry.register_pair("Security", audit)
    assert registry.get("security") is audit
    assert not registry.contains("audit")


def test_unknown_name_raises(registry) -> None:
    """未注册名称必须抛出 ConfigurationNotFoundError，而不是静默回落"""
    with pytest.raises(ConfigurationNotFoundError) as excinfo:
        registry.get("nope")

    error = excinfo.value
    assert isinstance(error, KeyError)
    assert isinstance(error, LogRouterError)
    assert error.code == "LOG_TYPE_NOT_FOUND"
    assert error.details == {"name": "nope"}
    assert str(error) == "Log type 'nope' is not registered."


def test_get_all_returns_every_entry(registry) -> None:
    audit = LogTypeDescriptor(name="Audit")
    registry.register(audit)
    everything = registry.get_all()
    assert audit in everything
    assert len(everything) == len(LogCategory) + 1


def test_concurrent_registration(registry) -> None:
    """并发注册与读取不需要调用方加锁"""
    barrier = threading.Barrier(8)
    errors: list[BaseException] = []

    def worker(index: int) -> None:
        barrier.wait()
        try:
            for n in range(50):
                name = f"custom-{index}-{n}"
                registry.register(LogTypeDescriptor(name=name))
                assert registry.get(name.upper()).name == name
                registry.get_all()
        except BaseException as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(registry) == len(LogCategory) + 8 * 50
