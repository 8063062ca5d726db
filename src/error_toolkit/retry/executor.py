"""
Retry executor with configurable backoff.

This module implements RetryExecutor, which invokes an async operation
until it succeeds, the retry_if predicate declines a failure, or the
attempt budget runs out.

State machine (one executor call):
    ATTEMPTING(n) --success--> SUCCEEDED
    ATTEMPTING(n) --failure, n == max_retries--> EXHAUSTED
    ATTEMPTING(n) --failure, retry_if falsy--> REJECTED
    ATTEMPTING(n) --failure--> on_retry(error, n+1), sleep, ATTEMPTING(n+1)

On EXHAUSTED or REJECTED the last exception is re-raised as-is, with a
RetryMetadata attached as ``exc.retry_metadata``.

Usage:
    executor = RetryExecutor(RetryPolicy(max_retries=5, backoff="linear"))
    profile = await executor.execute(lambda: client.get_profile(user_id))
"""

import asyncio
import functools
import inspect
import random
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

import structlog

from error_toolkit.config import settings
from error_toolkit.monitoring.metrics import retry_attempts_total, retry_sequences_total
from error_toolkit.retry.backoff import UniformFn, compute_delay
from error_toolkit.retry.metadata import RetryMetadata, RetryState
from error_toolkit.retry.policy import RetryPolicy

logger = structlog.get_logger(__name__)

T = TypeVar("T")

Operation = Callable[[], Union[Awaitable[T], T]]
SleepFn = Callable[[float], Awaitable[Any]]


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class RetryExecutor:
    """
    Runs an operation under a RetryPolicy.

    Only ``Exception`` subclasses count as failures. Other BaseExceptions
    (asyncio.CancelledError, KeyboardInterrupt) propagate immediately, so
    cancellation can be layered on top by cancelling the calling task.

    Hooks run to completion before the executor sleeps or returns. An
    exception raised by retry_if or on_retry aborts the sequence and
    propagates without retry metadata.

    Attributes:
        policy: Retry policy (shared by every execute() call)
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        *,
        sleep: Optional[SleepFn] = None,
        uniform: UniformFn = random.uniform,
    ):
        """
        Initialize retry executor.

        Args:
            policy: Retry policy (defaults to RetryPolicy())
            sleep: Coroutine function taking seconds (defaults to asyncio.sleep)
            uniform: Random source for jitter, called as uniform(low, high)
        """
        self.policy = policy if policy is not None else RetryPolicy()
        self._sleep = sleep if sleep is not None else asyncio.sleep
        self._uniform = uniform

    async def execute(self, operation: Operation[T]) -> T:
        """
        Invoke ``operation`` until success or a terminal failure.

        Args:
            operation: Zero-argument callable returning an awaitable (or a value)

        Returns:
            The operation's result

        Raises:
            Exception: The last failure, with ``retry_metadata`` attached
        """
        policy = self.policy
        max_attempts = policy.max_attempts
        errors: list[BaseException] = []
        delays_ms: list[int] = []
        start_time = time.perf_counter()
        attempt = 0

        while True:
            try:
                result = await _resolve(operation())
            except Exception as exc:
                errors.append(exc)
                self._count_attempt("failure")

                logger.warning(
                    "Retry attempt failed",
                    attempt=attempt + 1,
                    max_attempts=max_attempts,
                    error_type=type(exc).__name__,
                )

                if attempt + 1 >= max_attempts:
                    self._attach(exc, RetryState.EXHAUSTED, errors, delays_ms, start_time)
                    raise

                if policy.retry_if is not None and not await _resolve(policy.retry_if(exc)):
                    self._attach(exc, RetryState.REJECTED, errors, delays_ms, start_time)
                    raise

                if policy.on_retry is not None:
                    await _resolve(policy.on_retry(exc, attempt + 1))

                delay_ms = compute_delay(attempt + 1, policy, self._uniform)
                delays_ms.append(delay_ms)
                logger.info(
                    "Retrying after backoff",
                    next_attempt=attempt + 2,
                    delay_ms=delay_ms,
                    backoff=str(getattr(policy.backoff, "value", policy.backoff)),
                )
            else:
                self._count_attempt("success")
                self._count_sequence(RetryState.SUCCEEDED)
                if attempt > 0:
                    logger.info("Retry sequence succeeded", total_attempts=attempt + 1)
                return result

            await self._sleep(delay_ms / 1000)
            attempt += 1

    def _attach(
        self,
        exc: BaseException,
        state: RetryState,
        errors: list[BaseException],
        delays_ms: list[int],
        start_time: float,
    ) -> None:
        total_latency_ms = int((time.perf_counter() - start_time) * 1000)
        exc.retry_metadata = RetryMetadata(  # type: ignore[attr-defined]
            total_attempts=len(errors),
            final_state=state,
            errors=list(errors),
            delays_ms=list(delays_ms),
            total_latency_ms=total_latency_ms,
        )
        self._count_sequence(state)

        log = logger.error if state is RetryState.EXHAUSTED else logger.warning
        log(
            "Retry sequence failed",
            final_state=state.value,
            total_attempts=len(errors),
            total_latency_ms=total_latency_ms,
            final_error_type=type(exc).__name__,
        )

    @staticmethod
    def _count_attempt(outcome: str) -> None:
        if settings.PROMETHEUS_ENABLED:
            retry_attempts_total.labels(outcome=outcome).inc()

    @staticmethod
    def _count_sequence(state: RetryState) -> None:
        if settings.PROMETHEUS_ENABLED:
            retry_sequences_total.labels(state=state.value).inc()


async def retry(
    operation: Operation[T],
    policy: Optional[RetryPolicy] = None,
    *,
    sleep: Optional[SleepFn] = None,
    uniform: UniformFn = random.uniform,
    **overrides: Any,
) -> T:
    """
    Run ``operation`` with retries.

    Policy fields can be passed directly as keyword arguments, either
    alone or on top of an explicit policy:

        await retry(fetch, max_retries=2, backoff="linear", jitter=False)
    """
    base = policy if policy is not None else RetryPolicy()
    if overrides:
        base = base.with_overrides(**overrides)
    return await RetryExecutor(base, sleep=sleep, uniform=uniform).execute(operation)


def with_retry(
    policy: Optional[RetryPolicy] = None, **overrides: Any
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator form of retry() for coroutine functions."""

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await retry(lambda: func(*args, **kwargs), policy, **overrides)

        return wrapper

    return decorator
