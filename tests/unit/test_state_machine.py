"""
Unit tests for ApprovalStateMachine class.
Tests all state transitions, allowed actions, and helper methods.
"""
import pytest
from shared.state_machine import (
    ApprovalStateMachine,
    ApprovalState,
    TransitionError,
    Transition
)


class TestApprovalStateEnum:
    """Tests for ApprovalState enum."""

    def test_all_states_exist(self):
        """All expected states should exist."""
        assert ApprovalState.PENDING.value == "PENDING"
        assert ApprovalState.APPROVED.value == "APPROVED"
        assert ApprovalState.REJECTED.value == "REJECTED"

    def test_state_compares_to_stored_string(self):
        """Stored status strings compare equal to states."""
        assert ApprovalState.APPROVED == "APPROVED"


class TestTransitionError:
    """Tests for TransitionError exception."""

    def test_error_attributes(self):
        error = TransitionError("PENDING", "APPROVED")
        assert error.from_state == "PENDING"
        assert error.to_state == "APPROVED"

    def test_default_reason(self):
        error = TransitionError("PENDING", "APPROVED")
        assert "PENDING" in str(error)
        assert "APPROVED" in str(error)

    def test_custom_reason(self):
        error = TransitionError("PENDING", "APPROVED", "Custom error message")
        assert str(error) == "Custom error message"


class TestStateMachineInit:

    def test_default_initial_state(self):
        """Default initial state should be PENDING."""
        sm = ApprovalStateMachine()
        assert sm.state == ApprovalState.PENDING

    def test_custom_initial_state(self):
        sm = ApprovalStateMachine(initial_state=ApprovalState.APPROVED)
        assert sm.state == ApprovalState.APPROVED

    def test_empty_history(self):
        assert ApprovalStateMachine().get_history() == []


class TestTransitions:
    """Tests for valid and invalid transitions."""

    @pytest.mark.parametrize('start,action,end', [
        (ApprovalState.PENDING, 'approve', ApprovalState.APPROVED),
        (ApprovalState.PENDING, 'reject', ApprovalState.REJECTED),
        (ApprovalState.REJECTED, 'approve', ApprovalState.APPROVED),
        (ApprovalState.APPROVED, 'reject', ApprovalState.REJECTED),
    ])
    def test_valid_transitions(self, start, action, end):
        sm = ApprovalStateMachine(initial_state=start)
        assert sm.can_transition(action)
        assert sm.transition(action) == end
        assert sm.state == end

    @pytest.mark.parametrize('start,action', [
        (ApprovalState.APPROVED, 'approve'),
        (ApprovalState.REJECTED, 'reject'),
        (ApprovalState.PENDING, 'register'),
    ])
    def test_invalid_transitions(self, start, action):
        """Same-state and unknown actions raise TransitionError."""
        sm = ApprovalStateMachine(initial_state=start)
        assert not sm.can_transition(action)

        with pytest.raises(TransitionError):
            sm.transition(action)
        assert sm.state == start

    def test_history_records_transitions(self):
        sm = ApprovalStateMachine()
        sm.transition('approve')
        sm.transition('reject')

        history = sm.get_history()
        assert history == [
            (ApprovalState.PENDING, 'approve', ApprovalState.APPROVED),
            (ApprovalState.APPROVED, 'reject', ApprovalState.REJECTED),
        ]

    def test_history_is_a_copy(self):
        sm = ApprovalStateMachine()
        sm.transition('approve')
        sm.get_history().clear()
        assert len(sm.get_history()) == 1

    def test_transition_table_entries(self):
        assert all(isinstance(t, Transition) for t in ApprovalStateMachine.TRANSITIONS)


class TestAllowedActions:

    def test_only_approved_can_register(self):
        assert ApprovalStateMachine(ApprovalState.APPROVED).can_perform('register')
        assert not ApprovalStateMachine(ApprovalState.PENDING).can_perform('register')
        assert not ApprovalStateMachine(ApprovalState.REJECTED).can_perform('register')

    def test_everyone_can_view_events(self):
        for state in ApprovalState:
            assert ApprovalStateMachine(state).can_perform('view_events')

    def test_next_step(self):
        assert ApprovalStateMachine(ApprovalState.PENDING).next_step == "awaiting_approval"
        assert ApprovalStateMachine(ApprovalState.APPROVED).next_step == "register_events"
        assert ApprovalStateMachine(ApprovalState.REJECTED).next_step == "contact_organizers"


class TestFromStateString:

    def test_known_state(self):
        sm = ApprovalStateMachine.from_state_string("REJECTED")
        assert sm.state == ApprovalState.REJECTED

    def test_unknown_state_defaults_to_pending(self):
        """Unrecognized status strings never grant registration."""
        sm = ApprovalStateMachine.from_state_string("approved-ish")
        assert sm.state == ApprovalState.PENDING
        assert not sm.can_perform('register')
