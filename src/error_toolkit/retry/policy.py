"""
Retry policy configuration.

A RetryPolicy is an immutable snapshot of how a retry sequence behaves:
attempt budget, backoff strategy, delay bounds, jitter and the two hooks
(retry_if, on_retry). Policies are never validated. An unknown backoff
strategy falls back to a fixed delay, and a negative max_retries means a
single attempt.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

from error_toolkit.errors.exceptions import ErrorKind, classify

if TYPE_CHECKING:
    from error_toolkit.config import Settings

RetryPredicate = Callable[[BaseException], Union[bool, Awaitable[bool]]]
RetryCallback = Callable[[BaseException, int], Union[None, Awaitable[None]]]

TRANSIENT_STATUS_CODES = frozenset({408, 425, 429})


class BackoffStrategy(str, Enum):
    """Delay growth between attempts."""

    EXPONENTIAL = "exponential"
    LINEAR = "linear"
    FIXED = "fixed"


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry configuration.

    Attributes:
        max_retries: Retries after the first attempt (0 = single attempt)
        backoff: Strategy name; unrecognized values behave as "fixed"
        initial_delay_ms: Base delay for the first retry
        max_delay_ms: Cap applied before jitter
        jitter: Apply +/-25% random jitter to each delay
        retry_if: Called with each failure; a falsy result stops retrying
        on_retry: Called with (error, retry_number) before each backoff sleep
    """

    max_retries: int = 3
    backoff: Union[BackoffStrategy, str] = BackoffStrategy.EXPONENTIAL
    initial_delay_ms: int = 1000
    max_delay_ms: int = 30000
    jitter: bool = True
    retry_if: Optional[RetryPredicate] = None
    on_retry: Optional[RetryCallback] = None

    @property
    def max_attempts(self) -> int:
        """Total operation invocations allowed."""
        return max(self.max_retries, 0) + 1

    def with_overrides(self, **overrides: Any) -> "RetryPolicy":
        """Copy of this policy with some fields replaced."""
        return replace(self, **overrides)

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides: Any) -> "RetryPolicy":
        """Build a policy from RETRY_* settings."""
        policy = cls(
            max_retries=settings.RETRY_MAX_RETRIES,
            backoff=settings.RETRY_BACKOFF,
            initial_delay_ms=settings.RETRY_INITIAL_DELAY_MS,
            max_delay_ms=settings.RETRY_MAX_DELAY_MS,
            jitter=settings.RETRY_JITTER,
        )
        return policy.with_overrides(**overrides) if overrides else policy


def is_transient_error(error: BaseException) -> bool:
    """
    Default-friendly retry_if predicate.

    Retries unclassified errors (network blips, driver errors) and
    operational errors whose status signals a temporary condition
    (408, 425, 429, 5xx). Other operational errors (4xx) are final.
    """
    if classify(error) is not ErrorKind.OPERATIONAL:
        return True
    status_code = getattr(error, "status_code", None) or 500
    return status_code >= 500 or status_code in TRANSIENT_STATUS_CODES
