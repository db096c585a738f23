"""
State transition rules for validation jobs.

Lifecycle: QUEUED -> PROCESSING | SKIPPED, PROCESSING -> COMPLETED | ERROR.
QUEUED -> ERROR covers jobs that never reached a worker (worker crash,
shutdown). Terminal states are immutable and nothing is retried.
"""

from typing import FrozenSet, Set, Tuple

from app.jobs.errors import InvalidStateTransitionError
from app.jobs.models import JobStatus


TERMINAL_JOB_STATES: FrozenSet[JobStatus] = frozenset({
    JobStatus.SKIPPED,
    JobStatus.COMPLETED,
    JobStatus.ERROR,
})


_JOB_TRANSITIONS: Set[Tuple[JobStatus, JobStatus]] = {
    (JobStatus.QUEUED, JobStatus.PROCESSING),
    (JobStatus.QUEUED, JobStatus.SKIPPED),
    (JobStatus.QUEUED, JobStatus.ERROR),
    (JobStatus.PROCESSING, JobStatus.COMPLETED),
    (JobStatus.PROCESSING, JobStatus.ERROR),
}


def is_terminal(status: JobStatus) -> bool:
    return status in TERMINAL_JOB_STATES


def can_transition(current: JobStatus, target: JobStatus) -> bool:
    return (current, target) in _JOB_TRANSITIONS


def validate_transition(job_id: str, current: JobStatus, target: JobStatus) -> None:
    """
    Raise if ``current -> target`` is not a legal job transition.

    Raises:
        InvalidStateTransitionError: For any transition out of a terminal
            state, backwards, or skipping PROCESSING on the way to COMPLETED.
    """
    if not can_transition(current, target):
        raise InvalidStateTransitionError(job_id, current.value, target.value)
