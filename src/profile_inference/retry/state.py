"""
Retry state machine.

One profile request moves through at most two attempts:

    FIRST_ATTEMPT -> SUCCEEDED | RETRYING | FAILED | DEGRADED
    RETRYING      -> SUCCEEDED | FAILED | DEGRADED

Terminal states have no outgoing transitions, so a second retry cannot be
expressed.
"""

from dataclasses import dataclass, field
from enum import Enum


class RetryState(str, Enum):
    FIRST_ATTEMPT = "first_attempt"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    DEGRADED = "degraded"


ALLOWED_TRANSITIONS: dict[RetryState, frozenset[RetryState]] = {
    RetryState.FIRST_ATTEMPT: frozenset(
        {RetryState.SUCCEEDED, RetryState.RETRYING, RetryState.FAILED, RetryState.DEGRADED}
    ),
    RetryState.RETRYING: frozenset({RetryState.SUCCEEDED, RetryState.FAILED, RetryState.DEGRADED}),
    RetryState.SUCCEEDED: frozenset(),
    RetryState.FAILED: frozenset(),
    RetryState.DEGRADED: frozenset(),
}


class InvalidTransitionError(Exception):
    """Raised on a transition the state machine does not allow."""

    def __init__(self, current: RetryState, target: RetryState):
        super().__init__(f"Invalid retry transition: {current.value} -> {target.value}")
        self.current = current
        self.target = target


@dataclass
class RetryStateMachine:
    """
    Tracks the state of one request.

    Attributes:
        state: Current state
        history: Every state entered, in order (starts with FIRST_ATTEMPT)
    """

    state: RetryState = RetryState.FIRST_ATTEMPT
    history: list[RetryState] = field(default_factory=lambda: [RetryState.FIRST_ATTEMPT])

    def can_transition(self, target: RetryState) -> bool:
        return target in ALLOWED_TRANSITIONS[self.state]

    def transition(self, target: RetryState) -> RetryState:
        """
        Move to `target`.

        Raises:
            InvalidTransitionError: Transition not allowed from the current state
        """
        if not self.can_transition(target):
            raise InvalidTransitionError(self.state, target)
        self.state = target
        self.history.append(target)
        return target

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.state]

    @property
    def retried(self) -> bool:
        return RetryState.RETRYING in self.history

    @property
    def attempts(self) -> int:
        """LLM invocations implied by the path taken so far."""
        return 2 if self.retried else 1
