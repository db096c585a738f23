"""
Job and validation pipeline error types.

Store and service errors inherit from JobError. Failures inside the
validation pipeline inherit from ValidationPipelineError; the runner turns
those into a job's ``error`` status instead of letting them escape.
"""

from typing import Optional


class JobError(Exception):
    """Base exception for job store and service failures."""
    pass


class JobNotFoundError(JobError):
    """Raised when a job id is not in the store."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class InvalidStateTransitionError(JobError):
    """Raised when attempting an illegal job status transition."""

    def __init__(self, job_id: str, current_state: str, target_state: str):
        self.job_id = job_id
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(
            f"Invalid state transition for job {job_id}: "
            f"{current_state} -> {target_state}"
        )


class JobStoreNotInitializedError(JobError):
    """Raised when the store is used before initialize() was called."""

    def __init__(self):
        super().__init__("Job store has not been initialized")


class JobQueueFullError(JobError):
    """Raised when the validation queue cannot accept more work."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(f"Validation queue is full ({capacity} jobs waiting)")


class ValidationPipelineError(Exception):
    """Base exception for failures while running the external validator."""
    pass


class ToolUnavailableError(ValidationPipelineError):
    """Raised when the validator executable cannot be found on PATH."""

    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(f"{executable} is not available on PATH")


class ResourceAcquisitionError(ValidationPipelineError):
    """Raised when the temporary output file cannot be created."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Could not create validation output file: {reason}")


class ProcessFailureError(ValidationPipelineError):
    """Raised when the validator exits non-zero or exceeds its time budget."""

    def __init__(
        self,
        returncode: Optional[int] = None,
        timed_out: bool = False,
        stderr: str = "",
    ):
        self.returncode = returncode
        self.timed_out = timed_out
        self.stderr = stderr
        if timed_out:
            message = "Validator timed out"
        else:
            message = f"Validator exited with status {returncode}"
        super().__init__(message)


class OutputReadError(ValidationPipelineError):
    """Raised when the validator output file cannot be read back."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read validation data from {path}: {reason}")


class ReportParseError(ValidationPipelineError):
    """Raised when validator output is not a usable report document."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Could not parse validation report: {reason}")
