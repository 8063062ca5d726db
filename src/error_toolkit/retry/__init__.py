"""
Retry executor with backoff and jitter.

Repeatedly invokes a fallible async operation for transient-failure
recovery:

1. **Attempt**: invoke the operation; return on success
2. **Classify**: consult retry_if; a falsy answer stops immediately
3. **Back off**: exponential, linear or fixed delay, capped, with jitter
4. **Give up**: re-raise the last failure with its attempt history

Main Components:
    - RetryExecutor: Drives the attempt/backoff state machine
    - RetryPolicy: Immutable retry configuration
    - compute_delay: Pure backoff delay function
    - RetryMetadata: Attempt history attached to the final failure

Usage:
    >>> from error_toolkit.retry import retry
    >>> data = await retry(lambda: client.fetch(key), max_retries=2)
"""

from error_toolkit.retry.backoff import compute_delay
from error_toolkit.retry.executor import RetryExecutor, retry, with_retry
from error_toolkit.retry.metadata import RetryMetadata, RetryState, get_attempt_log
from error_toolkit.retry.policy import BackoffStrategy, RetryPolicy, is_transient_error

__all__ = [
    "RetryExecutor",
    "RetryPolicy",
    "RetryMetadata",
    "RetryState",
    "BackoffStrategy",
    "compute_delay",
    "get_attempt_log",
    "is_transient_error",
    "retry",
    "with_retry",
]
