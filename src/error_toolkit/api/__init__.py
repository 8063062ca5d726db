"""
FastAPI integration.

- error_handlers.py: Exception handlers producing structured error responses
- middleware.py: Request id tracing (feeds request_id into error context)
"""

from error_toolkit.api.error_handlers import (
    build_error_handler,
    exception_handlers,
    install_error_handlers,
)
from error_toolkit.api.middleware import RequestTracingMiddleware

__all__ = [
    "RequestTracingMiddleware",
    "build_error_handler",
    "exception_handlers",
    "install_error_handlers",
]
