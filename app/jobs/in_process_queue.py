"""In-process job queue using asyncio.

A bounded queue of job ids feeds a fixed pool of worker tasks, so at most
``concurrency`` validator processes run at once. No external broker needed.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from app.jobs.dispatcher import JobDispatcher
from app.jobs.errors import JobQueueFullError

logger = logging.getLogger(__name__)


class InProcessQueue(JobDispatcher):
    """Local async job queue processed by a pool of asyncio workers."""

    def __init__(
        self,
        worker_fn: Callable[[str], Awaitable[object]],
        concurrency: int = 4,
        max_queue_size: int = 1000,
        on_crash: Optional[Callable[[str, BaseException], None]] = None,
        on_drop: Optional[Callable[[str], None]] = None,
    ):
        """
        worker_fn: async callable(job_id)
            Drives one job to a terminal state. Expected to handle its own
            failures; anything it raises is reported to ``on_crash``.
        on_drop: callable(job_id)
            Called for jobs abandoned by stop(), queued or in flight.
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=max_queue_size)
        self._max_queue_size = max_queue_size
        self._worker_fn = worker_fn
        self._concurrency = concurrency
        self._on_crash = on_crash
        self._on_drop = on_drop
        self._tasks: List[asyncio.Task] = []
        self._running = False

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return self._running

    def has_capacity(self) -> bool:
        return not self._queue.full()

    def submit(self, job_id: str) -> None:
        try:
            self._queue.put_nowait(job_id)
        except asyncio.QueueFull:
            raise JobQueueFullError(self._max_queue_size) from None

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._tasks = [
            asyncio.create_task(self._worker_loop(n), name=f"validation-worker-{n}")
            for n in range(self._concurrency)
        ]
        logger.info("Started %d validation worker(s)", self._concurrency)

    async def stop(self) -> None:
        self._running = False
        for task in self._tasks:
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

        while True:
            try:
                job_id = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            self._queue.task_done()
            self._drop(job_id)

    async def join(self) -> None:
        """Wait until every submitted job has been processed."""
        await self._queue.join()

    def _drop(self, job_id: str) -> None:
        if self._on_drop is not None:
            self._on_drop(job_id)

    async def _worker_loop(self, worker_no: int) -> None:
        """Process jobs from the queue until stopped."""
        while self._running:
            # A cancelled get() leaves its item queued for stop() to drop
            try:
                job_id = await self._queue.get()
            except asyncio.CancelledError:
                break

            try:
                await self._worker_fn(job_id)
            except asyncio.CancelledError:
                self._drop(job_id)
                raise
            except Exception as e:
                # One broken job must not take the worker down with it
                logger.exception("Worker %d crashed on job %s", worker_no, job_id)
                if self._on_crash is not None:
                    self._on_crash(job_id, e)
            finally:
                self._queue.task_done()
