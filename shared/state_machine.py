from enum import Enum
from typing import List
from dataclasses import dataclass


class ApprovalState(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class TransitionError(Exception):
    def __init__(self, from_state: str, to_state: str, reason: str = None):
        self.from_state = from_state
        self.to_state = to_state
        self.reason = reason or f"Cannot transition from {from_state} to {to_state}"
        super().__init__(self.reason)


@dataclass
class Transition:
    from_state: ApprovalState
    to_state: ApprovalState
    action: str


class ApprovalStateMachine:
    # Admins may reverse an earlier decision; same-state actions are refused.
    TRANSITIONS = [
        Transition(ApprovalState.PENDING, ApprovalState.APPROVED, "approve"),
        Transition(ApprovalState.PENDING, ApprovalState.REJECTED, "reject"),
        Transition(ApprovalState.REJECTED, ApprovalState.APPROVED, "approve"),
        Transition(ApprovalState.APPROVED, ApprovalState.REJECTED, "reject"),
    ]

    ALLOWED_ACTIONS = {
        ApprovalState.PENDING: ["view_events", "approve", "reject"],
        ApprovalState.APPROVED: ["view_events", "register", "reject"],
        ApprovalState.REJECTED: ["view_events", "approve"],
    }

    NEXT_STEP = {
        ApprovalState.PENDING: "awaiting_approval",
        ApprovalState.APPROVED: "register_events",
        ApprovalState.REJECTED: "contact_organizers",
    }

    def __init__(self, initial_state: ApprovalState = ApprovalState.PENDING):
        self._state = initial_state
        self._history: List[tuple] = []

    @property
    def state(self) -> ApprovalState:
        return self._state

    @property
    def next_step(self) -> str:
        return self.NEXT_STEP.get(self._state, "contact_organizers")

    @property
    def allowed_actions(self) -> List[str]:
        return self.ALLOWED_ACTIONS.get(self._state, [])

    def can_transition(self, action: str) -> bool:
        for t in self.TRANSITIONS:
            if t.from_state == self._state and t.action == action:
                return True
        return False

    def can_perform(self, action: str) -> bool:
        return action in self.allowed_actions

    def transition(self, action: str) -> ApprovalState:
        for t in self.TRANSITIONS:
            if t.from_state == self._state and t.action == action:
                old_state = self._state
                self._state = t.to_state
                self._history.append((old_state, action, self._state))
                return self._state

        raise TransitionError(
            self._state.value,
            "unknown",
            f"No valid transition for action '{action}' from state '{self._state.value}'"
        )

    def get_history(self) -> List[tuple]:
        return self._history.copy()

    @classmethod
    def from_state_string(cls, state_str: str) -> "ApprovalStateMachine":
        try:
            state = ApprovalState(state_str)
        except ValueError:
            state = ApprovalState.PENDING
        return cls(initial_state=state)
