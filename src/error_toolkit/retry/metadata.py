"""
Retry metadata tracking.

This module defines the RetryMetadata dataclass that captures the history
of a failed retry sequence. The executor attaches it to the exception it
re-raises, as ``exc.retry_metadata``.
"""

from dataclasses import dataclass, field
from enum import Enum


class RetryState(str, Enum):
    """Terminal states of a retry sequence."""

    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class RetryMetadata:
    """
    History of a retry sequence that ended in failure.

    Attributes:
        total_attempts: Number of operation invocations made
        final_state: EXHAUSTED (budget used up) or REJECTED (retry_if declined)
        errors: Every failure in order; errors[0] is from attempt 1
        delays_ms: Backoff delays slept between attempts
        total_latency_ms: Time from first invocation to final failure (ms)
    """

    total_attempts: int
    final_state: RetryState
    errors: list[BaseException] = field(default_factory=list)
    delays_ms: list[int] = field(default_factory=list)
    total_latency_ms: int = 0

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.total_attempts < 1:
            raise ValueError("total_attempts must be >= 1")

        if len(self.errors) != self.total_attempts:
            raise ValueError("errors must hold one entry per attempt")

        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")

    @property
    def last_error(self) -> BaseException:
        return self.errors[-1]


def get_attempt_log(error: BaseException) -> list[BaseException]:
    """Failures recorded on ``error`` by the retry executor ([] if none)."""
    metadata = getattr(error, "retry_metadata", None)
    if isinstance(metadata, RetryMetadata):
        return list(metadata.errors)
    return []
