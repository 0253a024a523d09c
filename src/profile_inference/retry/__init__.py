"""
Corrective retry for profile generation.

At most one retry per request, modeled as an explicit state machine:

    FIRST_ATTEMPT -> SUCCEEDED | RETRYING | FAILED | DEGRADED
    RETRYING      -> SUCCEEDED | FAILED | DEGRADED

Main Components:
    - RetryController: Applies the failure policy around an attempt callable
    - RetryStateMachine / RetryState: Transition guard
    - ProfileGenerationError: Terminal validation failure
"""

from profile_inference.retry.controller import (
    AttemptResult,
    FailureAction,
    RetryController,
    RetryOutcome,
    classify_failure,
    degraded_profile,
    is_content_filter_error,
    is_retryable_error,
)
from profile_inference.retry.exceptions import ProfileGenerationError
from profile_inference.retry.state import (
    ALLOWED_TRANSITIONS,
    InvalidTransitionError,
    RetryState,
    RetryStateMachine,
)

__all__ = [
    "RetryController",
    "RetryOutcome",
    "AttemptResult",
    "FailureAction",
    "classify_failure",
    "degraded_profile",
    "is_content_filter_error",
    "is_retryable_error",
    "ProfileGenerationError",
    "RetryState",
    "RetryStateMachine",
    "ALLOWED_TRANSITIONS",
    "InvalidTransitionError",
]
