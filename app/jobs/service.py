"""Job service: the boundary the HTTP layer talks to."""

import logging
from collections import Counter
from typing import Dict, List, Optional
from urllib.parse import urlsplit

from app.jobs.dispatcher import JobDispatcher
from app.jobs.errors import InvalidStateTransitionError, JobQueueFullError
from app.jobs.models import Job, JobStatus
from app.jobs.state import is_terminal
from app.jobs.store import JobStore
from app.validation.runner import ValidationRunner

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = ("http", "https")


def normalize_stream_url(url: str) -> str:
    """Strip ``url`` and require an absolute http(s) URL.

    Raises:
        ValueError: If the URL is blank, relative, or not http(s)
    """
    url = url.strip()
    if not url:
        raise ValueError("url must not be empty")
    parts = urlsplit(url)
    if parts.scheme.lower() not in _ALLOWED_SCHEMES or not parts.netloc:
        raise ValueError("url must be an absolute http or https URL")
    return url


class JobService:
    """Creates jobs, schedules their validation, and answers queries."""

    def __init__(
        self,
        store: JobStore,
        dispatcher: JobDispatcher,
        runner: Optional[ValidationRunner] = None,
    ):
        """
        runner: when given, URLs it would skip are resolved at creation
            instead of waiting behind queued validations.
        """
        self._store = store
        self._dispatcher = dispatcher
        self._runner = runner

    def create_job(self, url: str) -> Job:
        """Store a job for ``url`` and schedule it. Does not wait.

        Jobs the validator cannot handle come back already SKIPPED; all
        others come back QUEUED.

        Raises:
            ValueError: If the URL is not an absolute http(s) URL
            JobQueueFullError: If no more validations can be queued
        """
        url = normalize_stream_url(url)

        if self._runner is not None and not self._runner.needs_validation(url):
            job = Job(url=url)
            self._store.append(job)
            return self._runner.skip_if_unsupported(job.id)

        if not self._dispatcher.has_capacity():
            raise JobQueueFullError(self._dispatcher.pending)

        job = Job(url=url)
        self._store.append(job)
        try:
            self._dispatcher.submit(job.id)
        except JobQueueFullError as e:
            self._store.transition(job.id, JobStatus.ERROR, error=str(e))
            raise

        logger.info("Queued job %s for %s", job.id, url)
        return job

    def list_jobs(self) -> List[Job]:
        return self._store.list()

    def get_job(self, job_id: str) -> Job:
        """Raises JobNotFoundError if the id is unknown."""
        return self._store.get_or_raise(job_id)

    def summary(self) -> Dict[str, int]:
        """Number of jobs in each status."""
        counts = Counter(job.status for job in self._store.list())
        return {status.value: counts.get(status, 0) for status in JobStatus}

    def fail_job(self, job_id: str, reason: str) -> None:
        """Force a non-terminal job to ERROR (worker crash, shutdown)."""
        job = self._store.get(job_id)
        if job is None or is_terminal(job.status):
            return
        try:
            self._store.transition(job_id, JobStatus.ERROR, error=reason)
        except InvalidStateTransitionError:
            # The runner reached a terminal state first
            logger.debug("Job %s already terminal, not failing it", job_id)
            return
        logger.warning("Job %s failed: %s", job_id, reason)
