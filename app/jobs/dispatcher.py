"""Job dispatcher interface."""

from abc import ABC, abstractmethod


class JobDispatcher(ABC):
    """Abstract interface for handing queued jobs to validation workers."""

    @abstractmethod
    def submit(self, job_id: str) -> None:
        """Enqueue a stored job for validation without waiting for it."""
        ...

    @abstractmethod
    def has_capacity(self) -> bool:
        """Whether submit() would currently accept another job."""
        ...

    @property
    @abstractmethod
    def pending(self) -> int:
        """Number of jobs waiting for a worker."""
        ...

    @abstractmethod
    async def start(self) -> None:
        """Start the dispatcher (e.g., start worker loops)."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Stop the dispatcher."""
        ...
