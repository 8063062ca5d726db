"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

from typing import Any, Callable

import pytest

from error_toolkit.config import Settings
from error_toolkit.errors.exceptions import AppError, wrap_error


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with deterministic defaults.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.RETRY_MAX_RETRIES = 5
    """
    return Settings(
        # === Application ===
        APP_NAME="error-toolkit (Test)",
        ENVIRONMENT="development",
        LOG_LEVEL="DEBUG",

        # === Retry ===
        RETRY_MAX_RETRIES=3,
        RETRY_BACKOFF="exponential",
        RETRY_INITIAL_DELAY_MS=10,
        RETRY_MAX_DELAY_MS=1000,
        RETRY_JITTER=False,

        # === Formatting ===
        ERROR_INCLUDE_STACK=False,
        ERROR_MAX_CAUSE_DEPTH=32,
    )


class SleepRecorder:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def delays_ms(self) -> list[int]:
        return [round(seconds * 1000) for seconds in self.calls]


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    """Sleep function that returns immediately and records delays."""
    return SleepRecorder()


@pytest.fixture
def flaky_operation() -> Callable[..., Any]:
    """Factory for async operations that fail N times before succeeding.

    The returned operation exposes ``calls`` (invocation count) and
    ``errors`` (exceptions raised so far).
    """

    def factory(failures: int, result: Any = "ok", error_factory: Callable[[int], Exception] | None = None):
        make_error = error_factory or (lambda n: ConnectionError(f"attempt {n} failed"))

        async def operation() -> Any:
            operation.calls += 1
            if operation.calls <= failures:
                error = make_error(operation.calls)
                operation.errors.append(error)
                raise error
            return result

        operation.calls = 0
        operation.errors = []
        return operation

    return factory


@pytest.fixture
def three_deep_chain() -> tuple[Exception, AppError, AppError]:
    """root -> mid -> top wrap chain."""
    root = ConnectionError("redis unreachable")
    mid = wrap_error(root, "Cache lookup failed", 502, "CACHE_MISS", {"key": "user:42"})
    top = wrap_error(mid, "Profile unavailable", 503, "PROFILE_UNAVAILABLE")
    return root, mid, top
