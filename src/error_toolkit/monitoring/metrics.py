"""Custom Prometheus metrics for the error toolkit.

Metrics live in the default registry, so they are exposed by whatever
/metrics endpoint the host application already serves.
Alert rules should be configured for:
- retry_sequences_total{state="exhausted"} (dependencies failing persistently)
- errors_handled_total{status_code=~"5.."} (server-side error rate)
"""

from prometheus_client import Counter

# === Retry Metrics ===

retry_attempts_total = Counter(
    "retry_attempts_total",
    "Operation invocations made by the retry executor, by outcome",
    ["outcome"],
)
"""
Attempts counter.

Labels:
- outcome: success (operation returned), failure (operation raised)
"""

retry_sequences_total = Counter(
    "retry_sequences_total",
    "Completed retry sequences by terminal state",
    ["state"],
)
"""
Terminal state counter.

Labels:
- state: succeeded, exhausted (attempt budget used up), rejected (predicate declined)

Alert thresholds:
- WARN: exhausted rate > 1% of sequences
"""

# === Error Handling Metrics ===

errors_handled_total = Counter(
    "errors_handled_total",
    "Errors passed through handle_error, by resolved status code",
    ["status_code"],
)
"""
Handled errors counter.

Labels:
- status_code: Resolved HTTP-style status ("500" for unclassified errors)
"""
