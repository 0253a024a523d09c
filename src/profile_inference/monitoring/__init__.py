"""Monitoring and metrics instrumentation for the profile inference layer.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from profile_inference.monitoring.metrics import (
    content_filter_total,
    labels_canonicalized_total,
    llm_latency_seconds,
    llm_tokens_total,
    profile_requests_total,
    retries_total,
    topic_classifications_total,
    validation_failures_total,
)

__all__ = [
    "profile_requests_total",
    "topic_classifications_total",
    "validation_failures_total",
    "labels_canonicalized_total",
    "retries_total",
    "content_filter_total",
    "llm_latency_seconds",
    "llm_tokens_total",
]
