"""Client wait lifecycle transition rules."""

from enum import Enum


class WaitState(str, Enum):
    STARTED = "STARTED"
    AWAITING_PUSH = "AWAITING_PUSH"
    AWAITING_PUSH_TIMEOUT = "AWAITING_PUSH_TIMEOUT"
    AWAITING_PULL = "AWAITING_PULL"
    RESOLVED = "RESOLVED"
    PULL_EXHAUSTED = "PULL_EXHAUSTED"
    CANCELLED = "CANCELLED"


TERMINAL_STATES: frozenset[WaitState] = frozenset(
    {
        WaitState.RESOLVED,
        WaitState.PULL_EXHAUSTED,
        WaitState.CANCELLED,
    }
)

_ALLOWED_TRANSITIONS: dict[WaitState, set[WaitState]] = {
    WaitState.STARTED: {WaitState.AWAITING_PUSH, WaitState.CANCELLED},
    WaitState.AWAITING_PUSH: {WaitState.RESOLVED, WaitState.AWAITING_PUSH_TIMEOUT, WaitState.CANCELLED},
    WaitState.AWAITING_PUSH_TIMEOUT: {WaitState.AWAITING_PULL, WaitState.CANCELLED},
    WaitState.AWAITING_PULL: {WaitState.RESOLVED, WaitState.PULL_EXHAUSTED, WaitState.CANCELLED},
    WaitState.RESOLVED: set(),
    WaitState.PULL_EXHAUSTED: set(),
    WaitState.CANCELLED: set(),
}


class InvalidWaitTransition(Exception):
    """Raised when a waiter is driven along an edge the lifecycle does not allow."""

    def __init__(self, current: WaitState, attempted: WaitState) -> None:
        self.current = current
        self.attempted = attempted
        self.allowed_next_states = allowed_next_states(current)
        super().__init__(f"Invalid wait transition {current.value} -> {attempted.value}")


def allowed_next_states(state: WaitState) -> list[WaitState]:
    """Return deterministically ordered allowed successors for a state."""
    return sorted(_ALLOWED_TRANSITIONS.get(state, set()), key=lambda s: s.value)


def ensure_transition(old_state: WaitState, new_state: WaitState) -> None:
    if new_state not in _ALLOWED_TRANSITIONS.get(old_state, set()):
        raise InvalidWaitTransition(old_state, new_state)
