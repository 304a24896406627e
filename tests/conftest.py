import os
import pytest
from typer.testing import CliRunner
from unittest.mock import AsyncMock, MagicMock
from typing import Any, Callable, List

from resilient.domain.interfaces.transport import Transport
from resilient.infrastructure.config.settings import clear_test_config
from resilient.infrastructure.monitoring.loggers import MemoryLogger


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def memory_logger():
    """A capturing logger that accepts every level."""
    return MemoryLogger()


@pytest.fixture
def fake_sleep():
    """Replaces asyncio.sleep for the executor; records requested delays without waiting."""
    return AsyncMock(return_value=None)


@pytest.fixture
def mock_transport():
    """A Transport whose verbs are AsyncMocks."""
    mock = MagicMock(spec=Transport)
    for verb in ("get", "post", "put", "patch", "delete"):
        setattr(mock, verb, AsyncMock(name=verb))
    return mock


class FlakyOperation:
    """Zero-argument coroutine function failing `failures` times, then returning `value`.

    With `failures=None` it always fails. Each failure raises a new exception
    built by `error_factory`; raised exceptions are kept in `errors`.
    """

    def __init__(self, failures=None, value: Any = "ok", error_factory: Callable[[int], Exception] = None):
        self.failures = failures
        self.value = value
        self.error_factory = error_factory or (lambda n: ConnectionError(f"attempt {n} failed"))
        self.calls = 0
        self.errors: List[Exception] = []

    async def __call__(self):
        self.calls += 1
        if self.failures is None or self.calls <= self.failures:
            error = self.error_factory(self.calls)
            self.errors.append(error)
            raise error
        return self.value


@pytest.fixture
def flaky():
    """Factory fixture for FlakyOperation instances."""
    return FlakyOperation


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch):
    """Keep tests independent of the developer's ~/.resilient and environment."""
    for key in list(os.environ):
        if key.startswith("RESILIENT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("resilient.infrastructure.config.settings._config", {})
    monkeypatch.setattr("resilient.infrastructure.config.settings._loaded", True)
    yield
    clear_test_config()
