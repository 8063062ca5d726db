"""
Error formatting and handling.

format_error() projects any failure (AppError, plain exception, or even a
non-exception value) into an ErrorDetails snapshot, following the cause
chain recursively. handle_error() does the same and hands the snapshot to
a logger hook.

Formatting never raises. Missing stacks, causes or messages just leave
the corresponding fields out.
"""

import inspect
import traceback
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime, timezone
from typing import Any, Optional, Union

import structlog

from error_toolkit.config import settings
from error_toolkit.errors.exceptions import (
    ErrorKind,
    classify,
    get_cause,
    resolve_status_code,
)
from error_toolkit.errors.models import ErrorDetails
from error_toolkit.monitoring.metrics import errors_handled_total

logger = structlog.get_logger(__name__)

TRUNCATED_MESSAGE = "[cause chain truncated]"

ErrorLogger = Callable[[ErrorDetails], Union[None, Awaitable[None]]]


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _safe_message(error: Any, kind: ErrorKind) -> str:
    if kind is ErrorKind.OPERATIONAL:
        message = getattr(error, "message", None)
        if isinstance(message, str):
            return message
    try:
        return str(error)
    except Exception:
        return type(error).__name__


def _stack_of(error: Any) -> Optional[str]:
    tb = getattr(error, "__traceback__", None)
    if tb is None:
        return None
    # Causes are rendered as their own snapshots
    lines = traceback.format_exception(type(error), error, tb, chain=False)
    return "".join(lines)


def _own_context(error: Any, kind: ErrorKind) -> Mapping[str, Any]:
    if kind is not ErrorKind.OPERATIONAL:
        return {}
    context = getattr(error, "context", None)
    return context if isinstance(context, Mapping) else {}


def _format(
    error: Any,
    include_stack: bool,
    include_timestamp: bool,
    option_context: Mapping[str, Any],
    visited: set[int],
    depth: int,
    max_depth: int,
) -> ErrorDetails:
    kind = classify(error)
    visited.add(id(error))

    merged_context = {**_own_context(error, kind), **option_context}

    fields: dict[str, Any] = {"message": _safe_message(error, kind)}
    if include_timestamp:
        fields["timestamp"] = _utc_timestamp()
    if include_stack:
        stack = _stack_of(error)
        if stack:
            fields["stack"] = stack
    if kind is ErrorKind.OPERATIONAL:
        fields["code"] = getattr(error, "code", None)
        fields["status_code"] = resolve_status_code(error)
    if merged_context:
        fields["context"] = merged_context

    cause = get_cause(error)
    if cause is not None and classify(cause) is not ErrorKind.NON_ERROR:
        if id(cause) in visited or depth + 1 > max_depth:
            logger.debug(
                "Cause chain truncated",
                depth=depth + 1,
                max_depth=max_depth,
                cyclic=id(cause) in visited,
            )
            fields["cause"] = ErrorDetails(message=TRUNCATED_MESSAGE, truncated=True)
        else:
            fields["cause"] = _format(
                cause,
                include_stack,
                False,  # only the top-level snapshot is timestamped
                {},  # option context is never forwarded to causes
                visited,
                depth + 1,
                max_depth,
            )

    return ErrorDetails(**fields)


def format_error(
    error: Any,
    *,
    include_stack: bool = False,
    include_timestamp: bool = True,
    context: Optional[Mapping[str, Any]] = None,
    max_depth: Optional[int] = None,
) -> ErrorDetails:
    """
    Format an error into a structured snapshot.

    Args:
        error: AppError, any exception, or any other failure value
        include_stack: Attach the formatted traceback when one exists
        include_timestamp: Attach an ISO-8601 timestamp to the top snapshot
        context: Extra context merged over the error's own (wins on collision)
        max_depth: Cause levels to render before truncating
            (defaults to ERROR_MAX_CAUSE_DEPTH)

    Returns:
        ErrorDetails snapshot; cyclic or over-deep cause chains end in a
        sentinel snapshot with ``truncated=True``
    """
    if max_depth is None:
        max_depth = settings.ERROR_MAX_CAUSE_DEPTH
    return _format(
        error,
        include_stack,
        include_timestamp,
        context or {},
        visited=set(),
        depth=0,
        max_depth=max_depth,
    )


def _record_handled(details: ErrorDetails) -> None:
    if settings.PROMETHEUS_ENABLED:
        errors_handled_total.labels(status_code=str(details.status_code or 500)).inc()


def handle_error(
    error: Any,
    *,
    logger: Optional[ErrorLogger] = None,
    include_stack: bool = False,
    include_timestamp: bool = True,
    context: Optional[Mapping[str, Any]] = None,
) -> ErrorDetails:
    """
    Format ``error`` and pass the snapshot to ``logger`` (called exactly once).

    Exceptions raised by the logger propagate to the caller. Use
    ahandle_error() when the logger is a coroutine function.
    """
    details = format_error(
        error,
        include_stack=include_stack,
        include_timestamp=include_timestamp,
        context=context,
    )
    _record_handled(details)
    if logger is not None:
        logger(details)
    return details


async def ahandle_error(
    error: Any,
    *,
    logger: Optional[ErrorLogger] = None,
    include_stack: bool = False,
    include_timestamp: bool = True,
    context: Optional[Mapping[str, Any]] = None,
) -> ErrorDetails:
    """Awaitable handle_error(): awaits the logger result when it is awaitable."""
    details = format_error(
        error,
        include_stack=include_stack,
        include_timestamp=include_timestamp,
        context=context,
    )
    _record_handled(details)
    if logger is not None:
        result = logger(details)
        if inspect.isawaitable(result):
            await result
    return details


def structlog_sink(
    bound_logger: Any = None, event: str = "Error handled"
) -> Callable[[ErrorDetails], None]:
    """
    Build a logger hook that emits snapshots through structlog.

    5xx snapshots (and snapshots without a status) log at error level,
    everything else at warning level. The snapshot goes under the
    ``error`` key so its timestamp doesn't clash with the log timestamp.
    """
    log = bound_logger if bound_logger is not None else structlog.get_logger("error_toolkit.errors")

    def sink(details: ErrorDetails) -> None:
        status_code = details.status_code or 500
        emit = log.error if status_code >= 500 else log.warning
        emit(
            event,
            status_code=status_code,
            chain_length=details.depth(),
            error=details.to_dict(),
        )

    return sink
