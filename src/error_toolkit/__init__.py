"""
Structured errors and retry-with-backoff for request-serving applications.

Provides:
- AppError: operational error with status, code, context and cause chain
- format_error / handle_error: recursive, serializable error snapshots
- retry: async retry executor with exponential/linear/fixed backoff and jitter
- FastAPI exception handlers mapping errors to HTTP responses

The FastAPI integration lives in error_toolkit.api and is imported on demand.
"""

__version__ = "0.1.0"

from error_toolkit.errors import (
    AppError,
    ErrorDetails,
    ahandle_error,
    catalog,
    create_error,
    format_error,
    handle_error,
    wrap_error,
)
from error_toolkit.retry import RetryExecutor, RetryPolicy, get_attempt_log, retry, with_retry

__all__ = [
    "AppError",
    "ErrorDetails",
    "RetryExecutor",
    "RetryPolicy",
    "ahandle_error",
    "catalog",
    "create_error",
    "format_error",
    "get_attempt_log",
    "handle_error",
    "retry",
    "with_retry",
    "wrap_error",
]
