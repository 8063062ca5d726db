"""Structured logging setup for services using the error toolkit.

Error snapshots reach the log through structlog_sink() under the ``error``
key. In production they stay nested so log pipelines can index the whole
snapshot; on the console they are flattened into a few ``error_*`` fields
and a cause trail, which reads better than a nested dict.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from error_toolkit.config import settings

ERROR_KEY = "error"


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every event with the configured application name and version."""
    event_dict.setdefault("app", settings.APP_NAME)
    event_dict.setdefault("app_version", settings.APP_VERSION)
    return event_dict


def _cause_trail(snapshot: dict[str, Any]) -> list[str]:
    trail = []
    cause = snapshot.get("cause")
    while isinstance(cause, dict):
        code = cause.get("code")
        message = cause.get("message", "")
        trail.append(f"{code}: {message}" if code else message)
        cause = cause.get("cause")
    return trail


def flatten_error_snapshot(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Replace a nested ``error`` snapshot with flat ``error_*`` fields.

    ``{"error": {"message": "Profile unavailable", "code": "X", "cause": {...}}}``
    becomes ``error_message``, ``error_code``, ``error_context`` and
    ``error_causes`` (one "CODE: message" entry per cause, outermost first).
    Events without a snapshot dict pass through untouched.
    """
    snapshot = event_dict.get(ERROR_KEY)
    if not isinstance(snapshot, dict) or "message" not in snapshot:
        return event_dict

    del event_dict[ERROR_KEY]
    event_dict["error_message"] = snapshot["message"]
    if "code" in snapshot:
        event_dict["error_code"] = snapshot["code"]
    if "context" in snapshot:
        event_dict["error_context"] = snapshot["context"]
    trail = _cause_trail(snapshot)
    if trail:
        event_dict["error_causes"] = trail
    if "stack" in snapshot:
        # ConsoleRenderer prints ``exception`` as a traceback block
        event_dict.setdefault("exception", snapshot["stack"])
    return event_dict


def configure_logging(
    log_level: Optional[str] = None, environment: Optional[str] = None
) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Level name; defaults to settings.LOG_LEVEL
        environment: "production" selects JSON output; defaults to
            settings.ENVIRONMENT

    Production renders one JSON object per line with the error snapshot
    nested. Any other environment uses the colored console renderer
    with snapshots flattened by flatten_error_snapshot().
    """
    log_level = log_level or settings.LOG_LEVEL
    environment = environment or settings.ENVIRONMENT
    level = getattr(logging, log_level.upper(), logging.INFO)
    is_production = environment.lower() == "production"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
    ]

    renderer: Processor
    if is_production:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        shared_processors.append(flatten_error_snapshot)
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    structlog.get_logger(__name__).debug(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer="json" if is_production else "console",
    )
