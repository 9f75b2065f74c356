import pytest

from fieldservice.domain.jobs.status import (
    TERMINAL_STATUSES,
    JobStatus,
    can_transition,
    is_terminal,
    validate_transition,
)
from fieldservice.errors import InvalidStateError


@pytest.mark.parametrize(
    "current,target",
    [
        ("scheduled", "in-progress"),
        ("in-progress", "completed"),
        ("scheduled", "cancelled"),
        ("in-progress", "cancelled"),
        ("scheduled", "issue"),
        ("in-progress", "issue"),
        ("issue", "in-progress"),
        ("issue", "cancelled"),
    ],
)
def test_legal_edges(current, target):
    assert can_transition(current, target)
    validate_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        ("scheduled", "completed"),
        ("completed", "scheduled"),
        ("completed", "cancelled"),
        ("cancelled", "scheduled"),
        ("cancelled", "in-progress"),
        ("in-progress", "scheduled"),
        ("issue", "completed"),
    ],
)
def test_illegal_edges_raise(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidStateError):
        validate_transition(current, target)


def test_same_status_is_a_no_op():
    for status in JobStatus:
        validate_transition(status.value, status.value)


def test_terminal_statuses():
    assert TERMINAL_STATUSES == {JobStatus.COMPLETED, JobStatus.CANCELLED}
    assert is_terminal("completed")
    assert is_terminal("cancelled")
    assert not is_terminal("issue")
    assert not is_terminal("scheduled")
