"""
Generation metadata tracking.

RetryMetadata captures how one profile request went through the retry state
machine, for audit trails, API responses and metrics.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class RetryMetadata:
    """
    Attempt history of one profile request.

    Attributes:
        total_attempts: LLM invocations made (1, or 2 after a corrective retry)
        retried: Whether the corrective retry transition was taken
        final_state: Terminal state name (succeeded, degraded)
        total_latency_ms: Wall time from first prompt build to final result (ms)
        model_version: Model reported by the transport for the last attempt
        validation_failures: error.details dicts of failed attempts, in order
    """

    total_attempts: int
    retried: bool
    final_state: str
    total_latency_ms: int
    model_version: Optional[str] = None
    validation_failures: list[dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.total_attempts not in (1, 2):
            raise ValueError("total_attempts must be 1 or 2")

        if self.retried != (self.total_attempts == 2):
            raise ValueError("retried must be True exactly when two attempts were made")

        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")
