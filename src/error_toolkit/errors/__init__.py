"""
Structured error model and formatting.

Main Components:
    - AppError: Operational error with status, code, context and cause
    - ErrorDetails: Serializable snapshot produced by the formatter
    - format_error / handle_error: Recursive cause-chain formatting
    - catalog: Named constructors for HTTP error statuses

Usage:
    >>> from error_toolkit.errors import wrap_error, format_error
    >>> try:
    ...     load_user(user_id)
    ... except KeyError as exc:
    ...     raise wrap_error(exc, "User lookup failed", 404, "NOT_FOUND")
"""

from error_toolkit.errors import catalog
from error_toolkit.errors.exceptions import (
    DEFAULT_STATUS_CODE,
    AppError,
    ErrorKind,
    classify,
    create_error,
    get_cause,
    resolve_status_code,
    wrap_error,
)
from error_toolkit.errors.formatter import (
    ahandle_error,
    format_error,
    handle_error,
    structlog_sink,
)
from error_toolkit.errors.models import ErrorDetails

__all__ = [
    "DEFAULT_STATUS_CODE",
    "AppError",
    "ErrorKind",
    "ErrorDetails",
    "catalog",
    "classify",
    "create_error",
    "get_cause",
    "resolve_status_code",
    "wrap_error",
    "format_error",
    "handle_error",
    "ahandle_error",
    "structlog_sink",
]
