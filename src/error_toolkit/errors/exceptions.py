"""
Operational error type and cause-chain helpers.

AppError is the structured failure raised by application code when a
failure is expected and classifiable (bad input, missing resource,
upstream outage). Anything else that reaches the toolkit is treated as an
unclassified error and defaults to status 500.

Core functions never branch on concrete classes. They call classify(),
which recognizes operational errors by capability (an exception whose
``is_operational`` attribute is True), so third-party exceptions can opt in
without inheriting from AppError.
"""

from enum import Enum
from typing import Any

DEFAULT_STATUS_CODE = 500


class ErrorKind(str, Enum):
    """Classification of a value observed as a failure."""

    OPERATIONAL = "operational"
    UNCLASSIFIED = "unclassified"
    NON_ERROR = "non_error"


class AppError(Exception):
    """
    Expected, classified failure with HTTP-style status and context.

    Attributes:
        message: Human-readable description
        status_code: HTTP-style classification code (500 when omitted)
        code: Machine-readable discriminator (e.g. "NOT_FOUND")
        context: Diagnostic payload, opaque to the toolkit
        cause: The error this one wraps (read-only after construction)
        is_operational: Always True for errors built through this class
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = DEFAULT_STATUS_CODE,
        code: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.context = context
        self.cause = cause
        self.is_operational = True

        # Keep Python's own chaining in sync so tracebacks show the cause
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status_code={self.status_code!r}, code={self.code!r})"
        )


def classify(value: Any) -> ErrorKind:
    """Tag a failure value as operational, unclassified or non-error."""
    if not isinstance(value, BaseException):
        return ErrorKind.NON_ERROR
    if getattr(value, "is_operational", False) is True:
        return ErrorKind.OPERATIONAL
    return ErrorKind.UNCLASSIFIED


def get_cause(error: Any) -> Any:
    """
    Return the error wrapped by ``error``, or None.

    Operational errors expose their cause explicitly; generic exceptions
    use the ``raise ... from`` chain (``__cause__``). Implicit exception
    context (``__context__``) is not treated as a cause.
    """
    kind = classify(error)
    if kind is ErrorKind.OPERATIONAL:
        return getattr(error, "cause", None)
    if kind is ErrorKind.UNCLASSIFIED:
        return error.__cause__
    return None


def resolve_status_code(error: Any) -> int:
    """Transport status for ``error``: its own status if truthy, else 500."""
    if classify(error) is ErrorKind.OPERATIONAL:
        return getattr(error, "status_code", None) or DEFAULT_STATUS_CODE
    return DEFAULT_STATUS_CODE


def wrap_error(
    original: Any,
    message: str,
    status_code: int | None = DEFAULT_STATUS_CODE,
    code: str | None = None,
    context: dict[str, Any] | None = None,
) -> AppError:
    """Wrap ``original`` in an AppError that carries it as its cause."""
    return AppError(message, status_code, code, context, cause=original)


def create_error(
    message: str,
    status_code: int | None = DEFAULT_STATUS_CODE,
    code: str | None = None,
    context: dict[str, Any] | None = None,
) -> AppError:
    """Build a standalone AppError (no cause)."""
    return AppError(message, status_code, code, context)
