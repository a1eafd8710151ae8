"""Generation status state machine."""

from enum import Enum

from backend.app.core.exceptions import InvalidTransitionError


class GenerationStatus(str, Enum):
    """Status of a report generation record."""

    QUEUED = "queued"
    RUNNING = "running"
    READY = "ready"
    FAILED = "failed"


ALLOWED_TRANSITIONS: dict[GenerationStatus, frozenset[GenerationStatus]] = {
    GenerationStatus.QUEUED: frozenset({GenerationStatus.RUNNING}),
    GenerationStatus.RUNNING: frozenset({GenerationStatus.READY, GenerationStatus.FAILED}),
    GenerationStatus.READY: frozenset(),
    GenerationStatus.FAILED: frozenset({GenerationStatus.RUNNING}),
}

# States from which a new generation may start
STARTABLE = frozenset(state for state, targets in ALLOWED_TRANSITIONS.items() if GenerationStatus.RUNNING in targets)


def check_transition(session_id: str, current: str, target: str) -> None:
    """
    Ensure ``current -> target`` is a legal transition.

    Raises:
        InvalidTransitionError: If the transition is not allowed
    """
    try:
        allowed = GenerationStatus(target) in ALLOWED_TRANSITIONS[GenerationStatus(current)]
    except ValueError:
        allowed = False
    if not allowed:
        raise InvalidTransitionError(session_id, current, target)
