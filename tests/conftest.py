from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from logrouter import LogDispatcher, PredefinedCatalog


def read_logs(folder: Path) -> str:
    """Concatenate every rolled file under ``folder``."""
    return "".join(path.read_text(encoding="utf-8") for path in sorted(folder.rglob("*")) if path.is_file())


@pytest.fixture
def log_root(tmp_path: Path) -> Path:
    return tmp_path / "app-logs"


@pytest.fixture
def dispatcher(log_root: Path):
    """Dispatcher writing under the test's tmp directory."""
    dispatcher = LogDispatcher(catalog=PredefinedCatalog(root=str(log_root)))
    yield dispatcher
    dispatcher.close()


@pytest.fixture(autouse=True)
def reset_structlog():
    """Tests that configure diagnostics must not leak into each other."""
    yield
    structlog.reset_defaults()
