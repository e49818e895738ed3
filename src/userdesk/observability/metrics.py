"""
Prometheus metrics collection for userdesk

This module provides metrics instrumentation for monitoring the user
filtering pipeline and user submissions.
"""
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# QUERY METRICS
# =======================

# Remote queries issued to the data source
queries_issued_total = Counter(
    name="userdesk_queries_issued_total",
    documentation="Total number of remote user queries issued",
    registry=REGISTRY,
)

# Remote queries that produced a result
queries_completed_total = Counter(
    name="userdesk_queries_completed_total",
    documentation="Total number of remote user queries that completed",
    labelnames=["outcome"],  # outcome: success, client, server, timeout
    registry=REGISTRY,
)

# Results dropped because newer parameters were issued
queries_superseded_total = Counter(
    name="userdesk_queries_superseded_total",
    documentation="Total number of remote query results discarded as stale",
    registry=REGISTRY,
)

query_duration_seconds = Histogram(
    name="userdesk_query_duration_seconds",
    documentation="Time spent waiting on the data source in seconds",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
    registry=REGISTRY,
)

# =======================
# SUBMISSION METRICS
# =======================

submissions_total = Counter(
    name="userdesk_submissions_total",
    documentation="Total number of user submissions",
    labelnames=["outcome"],  # outcome: success, validation, client, server, timeout
    registry=REGISTRY,
)

validation_failures_total = Counter(
    name="userdesk_validation_failures_total",
    documentation="Total number of field rule failures on submitted drafts",
    labelnames=["field_name"],
    registry=REGISTRY,
)


# =======================
# EXPORT FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


# =======================
# METRICS COLLECTOR CLASS
# =======================

class MetricsCollector:
    """
    Metrics collector for the filtering pipeline and submission controller.

    This class provides a unified interface for collecting metrics
    from the pipeline components.
    """

    def record_query_issued(self) -> None:
        increment_counter(queries_issued_total)

    def record_query_completed(self, outcome: str, duration_seconds: float = 0.0) -> None:
        """
        Record a remote query that produced a result.

        Args:
            outcome: "success" or the QueryError kind
            duration_seconds: Time spent waiting on the data source
        """
        increment_counter(queries_completed_total, outcome=outcome)
        if duration_seconds > 0:
            query_duration_seconds.observe(duration_seconds)

    def record_query_superseded(self) -> None:
        increment_counter(queries_superseded_total)

    def record_submission(self, outcome: str, field_errors: dict[str, str] | None = None) -> None:
        """
        Record a submission attempt.

        Args:
            outcome: "success" or the SubmitError kind
            field_errors: Failing fields of a rejected draft
        """
        increment_counter(submissions_total, outcome=outcome)
        for field_name in field_errors or {}:
            increment_counter(validation_failures_total, field_name=field_name)
