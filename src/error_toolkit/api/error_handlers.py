"""
FastAPI exception handlers for structured error responses.

Every error reaching the app boundary goes through ahandle_error(), with
the request method, path, client IP and request id merged into the
context. The response status comes from resolve_status_code(), so
unclassified exceptions and falsy status codes become 500.

Usage:
    app = FastAPI()
    app.add_middleware(RequestTracingMiddleware)
    install_error_handlers(app)
"""

from collections.abc import Callable, Coroutine, Mapping
from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from error_toolkit.api.middleware import REQUEST_ID_HEADER
from error_toolkit.config import settings
from error_toolkit.errors.catalog import create_from_status, validation_error
from error_toolkit.errors.exceptions import AppError, resolve_status_code
from error_toolkit.errors.formatter import ErrorLogger, ahandle_error, structlog_sink

logger = structlog.get_logger(__name__)

ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]

RESPONSE_FORMATS = ("json", "string")


def request_context(request: Request) -> dict[str, Any]:
    """Request fields merged into every error's context."""
    context: dict[str, Any] = {
        "method": request.method,
        "path": request.url.path,
        "ip": request.client.host if request.client else None,
    }
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        context["request_id"] = request_id
    return context


def build_error_handler(
    *,
    include_stack: Optional[bool] = None,
    response_format: Optional[str] = None,
    logger: Optional[ErrorLogger] = None,
    context: Optional[Mapping[str, Any]] = None,
) -> ExceptionHandler:
    """
    Create the handler that turns any exception into an error response.

    Args:
        include_stack: Include tracebacks in the body (ERROR_INCLUDE_STACK)
        response_format: "json" for the snapshot, "string" for the bare
            message (ERROR_RESPONSE_FORMAT); other values behave as "json"
        logger: Hook receiving each snapshot (structlog sink by default)
        context: Static context added to every error, below request fields

    Returns:
        Async exception handler for app.add_exception_handler()
    """
    stack = settings.ERROR_INCLUDE_STACK if include_stack is None else include_stack
    fmt = (response_format or settings.ERROR_RESPONSE_FORMAT).lower()
    sink = logger if logger is not None else structlog_sink()
    static_context = dict(context or {})

    async def error_handler(request: Request, exc: Exception) -> Response:
        details = await ahandle_error(
            exc,
            logger=sink,
            include_stack=stack,
            include_timestamp=settings.ERROR_INCLUDE_TIMESTAMP,
            context={**static_context, **request_context(request)},
        )
        status_code = resolve_status_code(exc)

        response: Response
        if fmt == "string":
            response = PlainTextResponse(details.message, status_code=status_code)
        else:
            response = JSONResponse(status_code=status_code, content=details.to_dict())

        # Unhandled exceptions are answered outside RequestTracingMiddleware
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response

    return error_handler


def build_http_exception_handler(error_handler: ExceptionHandler) -> ExceptionHandler:
    """Route Starlette HTTPExceptions (404 routes, 405 methods) through error_handler."""

    async def http_exception_handler(request: Request, exc: Exception) -> Response:
        status_code = getattr(exc, "status_code", 500)
        detail = getattr(exc, "detail", None)
        app_error = create_from_status(
            status_code, detail if isinstance(detail, str) else None
        )
        response = await error_handler(request, app_error)
        headers = getattr(exc, "headers", None)
        if headers:
            response.headers.update(headers)
        return response

    return http_exception_handler


def build_validation_exception_handler(error_handler: ExceptionHandler) -> ExceptionHandler:
    """Report request body/query validation failures as VALIDATION_ERROR (422)."""

    async def validation_exception_handler(request: Request, exc: Exception) -> Response:
        errors = exc.errors() if isinstance(exc, RequestValidationError) else []
        app_error = validation_error(
            "Request validation failed", {"errors": jsonable_encoder(errors)}
        )
        return await error_handler(request, app_error)

    return validation_exception_handler


def exception_handlers(**options: Any) -> dict[type, ExceptionHandler]:
    """
    Exception handler mapping for FastAPI app.add_exception_handler().

    Accepts the keyword options of build_error_handler().
    """
    error_handler = build_error_handler(**options)
    return {
        AppError: error_handler,
        RequestValidationError: build_validation_exception_handler(error_handler),
        StarletteHTTPException: build_http_exception_handler(error_handler),
        Exception: error_handler,
    }


def install_error_handlers(app: FastAPI, **options: Any) -> None:
    """Register the toolkit's exception handlers on ``app``."""
    response_format = options.get("response_format")
    if response_format and response_format.lower() not in RESPONSE_FORMATS:
        logger.warning(
            "Unknown error response format, falling back to json",
            response_format=response_format,
        )

    for exc_class, handler in exception_handlers(**options).items():
        app.add_exception_handler(exc_class, handler)
