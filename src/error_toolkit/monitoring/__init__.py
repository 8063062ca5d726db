"""Monitoring and metrics instrumentation for the error toolkit.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from error_toolkit.monitoring.metrics import (
    errors_handled_total,
    retry_attempts_total,
    retry_sequences_total,
)

__all__ = [
    "errors_handled_total",
    "retry_attempts_total",
    "retry_sequences_total",
]
