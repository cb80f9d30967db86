from collections.abc import Iterator
from pathlib import Path

import pytest

from devdash.util.log import Log, LogFormat, LogLevel


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("DEVDASH_TEST_HOME", str(tmp_path / "home"))
    monkeypatch.delenv("DEVDASH_CONFIG", raising=False)
    monkeypatch.delenv("DEVDASH_CONFIG_CONTENT", raising=False)
    return tmp_path / "home"


@pytest.fixture(autouse=True)
def _log_teardown() -> Iterator[None]:
    yield
    Log.configure(level=LogLevel.INFO, format=LogFormat.KV, console=False, file=False)
