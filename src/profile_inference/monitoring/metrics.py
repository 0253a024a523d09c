"""Custom Prometheus metrics for the profile inference layer.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- validation_failures_total (model output drifting away from the schema)
- retries_total (high corrective retry rate indicates prompt/model mismatch)
- content_filter_total (provider refusals)
- labels_canonicalized_total{outcome="opaque"} (labels outside the catalog)
"""

from prometheus_client import Counter, Histogram

# === Request Metrics ===

profile_requests_total = Counter(
    "profile_requests_total",
    "Total profile generation requests by mode and outcome",
    ["mode", "outcome"],
)
"""
Profile requests counter.

Labels:
- mode: fast, balanced, deep
- outcome: success, degraded, timeout, failed (invalid after retry), error
"""

topic_classifications_total = Counter(
    "topic_classifications_total",
    "Total topic classifications by category and method",
    ["category", "method"],
)
"""
Topic classification counter.

Labels:
- category: politics, economy, ..., general
- method: keyword, llm

A high share of category="general" indicates poor keyword coverage.
"""

# === Validation Metrics ===

validation_failures_total = Counter(
    "validation_failures_total",
    "Total validation failures by stage and error type",
    ["stage", "error_type"],
)
"""
Validation failures counter by stage and error type.

Labels:
- stage: normalize (unrecoverable text), parse (JSON), schema (JSON Schema)
- error_type: json_decode_error, not_json_object, type, minimum, required, ...

Alert thresholds:
- WARN: rate > 5% of total requests
- CRITICAL: rate > 15% of total requests
"""

labels_canonicalized_total = Counter(
    "labels_canonicalized_total",
    "Label ids processed by the canonicalizer by outcome",
    ["outcome"],
)
"""
Label canonicalization counter.

Labels:
- outcome: canonical (mapped onto a catalog id), opaque (kept as-is)
"""

# === Retry Metrics ===

retries_total = Counter(
    "retries_total",
    "Total corrective retries by outcome",
    ["success"],
)
"""
Corrective retry counter.

Labels:
- success: true (retry produced a valid profile), false (terminal failure)

Alert thresholds:
- WARN: retry rate > 10% of total requests
- CRITICAL: retry rate > 30% of total requests
"""

content_filter_total = Counter(
    "content_filter_total",
    "Total provider content-filter refusals (degraded profiles returned)",
)

# === LLM Performance Metrics ===

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "LLM generation latency in seconds",
    ["model", "success"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0],
)
"""
LLM generation latency histogram.

Labels:
- model: Model name (e.g., gpt-4o-mini, qwen2.5:7b)
- success: true (generation succeeded), false (generation failed)

Buckets reach the 600s request timeout.
"""

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Total tokens consumed by model and type",
    ["model", "token_type"],
)
"""
Token consumption counter.

Labels:
- model: Model name
- token_type: prompt (input tokens), completion (output tokens)
"""
