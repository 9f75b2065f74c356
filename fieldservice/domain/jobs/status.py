"""Job status machine"""

from enum import Enum

from ...errors import InvalidStateError


class JobStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ISSUE = "issue"


INITIAL_STATUS = JobStatus.SCHEDULED

TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED})

# Allowed edges; a status missing from the map has no way out
TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.SCHEDULED: frozenset({JobStatus.IN_PROGRESS, JobStatus.CANCELLED, JobStatus.ISSUE}),
    JobStatus.IN_PROGRESS: frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED, JobStatus.ISSUE}),
    JobStatus.ISSUE: frozenset({JobStatus.IN_PROGRESS, JobStatus.CANCELLED}),
}

STATUS_VALUES = tuple(status.value for status in JobStatus)


def is_terminal(status: str) -> bool:
    return JobStatus(status) in TERMINAL_STATUSES


def can_transition(current: str, target: str) -> bool:
    """True when target is reachable from current in one step, or is current itself"""
    current, target = JobStatus(current), JobStatus(target)
    if current == target:
        return True
    return target in TRANSITIONS.get(current, frozenset())


def validate_transition(current: str, target: str) -> None:
    """
    Raise InvalidStateError unless current -> target is a legal edge.

    Setting the status a job already has is accepted as a no-op.
    """
    if not can_transition(current, target):
        if is_terminal(current):
            raise InvalidStateError(f"Cannot change status of a {current} job")
        raise InvalidStateError(f"Invalid status transition from {current} to {target}")
