"""Backoff delay computation."""

import math
import random
from collections.abc import Callable

from error_toolkit.retry.policy import BackoffStrategy, RetryPolicy

JITTER_RATIO = 0.25

UniformFn = Callable[[float, float], float]


def compute_delay(
    attempt: int, policy: RetryPolicy, uniform: UniformFn = random.uniform
) -> int:
    """
    Delay in milliseconds before retry number ``attempt`` (1-based).

    exponential: initial * 2^(attempt-1); linear: initial * attempt;
    fixed (and unknown strategies): initial. The result is capped at
    max_delay_ms, then jittered by +/-25% when enabled. Jitter is applied
    after the cap, so a jittered delay may exceed the cap by up to 12.5%.

    Args:
        attempt: Retry number, starting at 1
        policy: Retry policy
        uniform: Random source, called as uniform(low, high)
    """
    initial = policy.initial_delay_ms

    if policy.backoff == BackoffStrategy.EXPONENTIAL:
        delay = initial * 2 ** (attempt - 1)
    elif policy.backoff == BackoffStrategy.LINEAR:
        delay = initial * attempt
    else:
        delay = initial

    delay = min(delay, policy.max_delay_ms)

    if policy.jitter:
        spread = delay * JITTER_RATIO
        delay = delay - spread + uniform(0, delay * 2 * JITTER_RATIO)

    # Round half up
    return max(math.floor(delay + 0.5), 0)
