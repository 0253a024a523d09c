"""
Unit tests for the retry state machine.
"""

import pytest

from profile_inference.retry.state import (
    ALLOWED_TRANSITIONS,
    InvalidTransitionError,
    RetryState,
    RetryStateMachine,
)


class TestRetryStateMachine:
    """Test suite for RetryStateMachine."""

    def test_initial_state(self):
        machine = RetryStateMachine()
        assert machine.state is RetryState.FIRST_ATTEMPT
        assert machine.history == [RetryState.FIRST_ATTEMPT]
        assert machine.attempts == 1
        assert not machine.retried
        assert not machine.is_terminal

    def test_retry_path(self):
        machine = RetryStateMachine()
        machine.transition(RetryState.RETRYING)
        machine.transition(RetryState.SUCCEEDED)

        assert machine.history == [RetryState.FIRST_ATTEMPT, RetryState.RETRYING, RetryState.SUCCEEDED]
        assert machine.attempts == 2
        assert machine.retried
        assert machine.is_terminal

    def test_second_retry_not_expressible(self):
        machine = RetryStateMachine()
        machine.transition(RetryState.RETRYING)

        with pytest.raises(InvalidTransitionError):
            machine.transition(RetryState.RETRYING)

    def test_degrade_from_retry(self):
        machine = RetryStateMachine()
        machine.transition(RetryState.RETRYING)
        machine.transition(RetryState.DEGRADED)

        assert machine.history == [RetryState.FIRST_ATTEMPT, RetryState.RETRYING, RetryState.DEGRADED]
        assert machine.attempts == 2
        assert machine.is_terminal

    def test_degraded_is_final(self):
        machine = RetryStateMachine()
        machine.transition(RetryState.DEGRADED)

        assert not machine.can_transition(RetryState.RETRYING)
        with pytest.raises(InvalidTransitionError) as exc_info:
            machine.transition(RetryState.RETRYING)
        assert exc_info.value.current is RetryState.DEGRADED
        assert "degraded -> retrying" in str(exc_info.value)

    @pytest.mark.parametrize("terminal", [RetryState.SUCCEEDED, RetryState.FAILED, RetryState.DEGRADED])
    def test_terminal_states_have_no_exits(self, terminal):
        assert ALLOWED_TRANSITIONS[terminal] == frozenset()
