"""
In-memory job store.

One instance is built at startup and handed to the service and the
validation runner. Jobs live for the lifetime of the process; there is no
delete path and nothing is written to disk.

Structural changes (append) and snapshot swaps (transition) happen under a
single lock, so a job appended before a read starts is always visible to it.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from app.jobs.errors import JobNotFoundError, JobStoreNotInitializedError
from app.jobs.models import Job, JobStatus, utcnow
from app.jobs.state import is_terminal, validate_transition

logger = logging.getLogger(__name__)


class JobStore:
    """Concurrency-safe collection of Job snapshots keyed by id."""

    def __init__(self):
        self._init_lock = threading.Lock()
        self._lock = threading.Lock()
        self._jobs: Optional[Dict[str, Job]] = None

    @property
    def initialized(self) -> bool:
        return self._jobs is not None

    def initialize(self) -> None:
        """Create the backing collection. Safe to call more than once."""
        with self._init_lock:
            if self._jobs is None:
                logger.info("Creating job store")
                self._jobs = {}

    def _require(self) -> Dict[str, Job]:
        if self._jobs is None:
            raise JobStoreNotInitializedError()
        return self._jobs

    def append(self, job: Job) -> None:
        """
        Add a new job.

        Raises:
            ValueError: If a job with the same id already exists
        """
        jobs = self._require()
        with self._lock:
            if job.id in jobs:
                raise ValueError(f"Job with ID '{job.id}' already exists")
            jobs[job.id] = job

    def list(self) -> List[Job]:
        """Snapshot of all jobs in creation order."""
        jobs = self._require()
        with self._lock:
            return list(jobs.values())

    def get(self, job_id: str) -> Optional[Job]:
        jobs = self._require()
        with self._lock:
            return jobs.get(job_id)

    def get_or_raise(self, job_id: str) -> Job:
        job = self.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def transition(self, job_id: str, status: JobStatus, **changes: Any) -> Job:
        """
        Move a job to ``status`` and store the updated snapshot.

        Terminal statuses also stamp ``end_time``. Extra keyword arguments
        (``report``, ``error``) are applied in the same swap.

        Raises:
            JobNotFoundError: If the job does not exist
            InvalidStateTransitionError: If the transition is not allowed
        """
        jobs = self._require()
        with self._lock:
            current = jobs.get(job_id)
            if current is None:
                raise JobNotFoundError(job_id)
            validate_transition(job_id, current.status, status)
            changes["status"] = status
            if is_terminal(status):
                changes["end_time"] = utcnow()
            updated = current.model_copy(update=changes)
            jobs[job_id] = updated
        return updated

    def __len__(self) -> int:
        jobs = self._require()
        with self._lock:
            return len(jobs)
