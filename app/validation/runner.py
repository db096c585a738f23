"""
Runs mediastreamvalidator for a queued job and records the outcome.

Each run is fail-fast: the first failure moves the job to ERROR and nothing
is retried. A run spawns at most one validator process and creates at most
one temporary output file, which is always removed before returning.
"""

import asyncio
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from app.jobs.errors import (
    OutputReadError,
    ProcessFailureError,
    ReportParseError,
    ResourceAcquisitionError,
    ToolUnavailableError,
    ValidationPipelineError,
)
from app.jobs.models import Job, JobStatus
from app.jobs.report import ValidationReport
from app.jobs.store import JobStore

logger = logging.getLogger(__name__)

# Keep enough of the validator's stderr to explain a failure
_STDERR_TAIL_CHARS = 2000


class ValidationRunner:
    """Drives one job at a time from QUEUED to a terminal status."""

    def __init__(
        self,
        store: JobStore,
        executable: str = "mediastreamvalidator",
        timeout_seconds: int = 30,
        kill_grace_seconds: float = 10.0,
        temp_dir: Optional[str] = None,
        skip_suffixes: Iterable[str] = (".mpd",),
    ):
        self._store = store
        self._executable = executable
        self._timeout_seconds = timeout_seconds
        self._kill_grace_seconds = kill_grace_seconds
        self._temp_dir = temp_dir
        self._skip_suffixes = tuple(skip_suffixes)

    @property
    def executable(self) -> str:
        return self._executable

    def needs_validation(self, url: str) -> bool:
        """DASH manifests (.mpd) are not HLS and are never sent to the tool."""
        return not url.endswith(self._skip_suffixes)

    def build_command(self, exe: str, url: str, output_path: str) -> List[str]:
        return [
            exe,
            "-t",
            str(self._timeout_seconds),
            f"--validation-data-path={output_path}",
            url,
        ]

    def skip_if_unsupported(self, job_id: str) -> Optional[Job]:
        """Move a queued job straight to SKIPPED if the tool cannot handle its URL.

        Returns the skipped snapshot, or None when the job needs validation.
        """
        job = self._store.get_or_raise(job_id)
        if self.needs_validation(job.url):
            return None
        logger.info("Skipping validation of %s for job %s", job.url, job_id)
        return self._store.transition(job_id, JobStatus.SKIPPED)

    async def run(self, job_id: str) -> Job:
        """Validate a stored job and return its terminal snapshot."""
        job = self._store.get_or_raise(job_id)

        skipped = self.skip_if_unsupported(job_id)
        if skipped is not None:
            return skipped

        self._store.transition(job_id, JobStatus.PROCESSING)
        try:
            report = await self._validate(job.url)
        except ValidationPipelineError as e:
            logger.warning("Validation failed for job %s: %s", job_id, e)
            return self._store.transition(job_id, JobStatus.ERROR, error=str(e))

        logger.info(
            "Validation completed for job %s (%d message(s))",
            job_id,
            report.message_count(),
        )
        return self._store.transition(job_id, JobStatus.COMPLETED, report=report)

    async def _validate(self, url: str) -> ValidationReport:
        # Looked up on every run so installing the tool needs no restart
        exe = shutil.which(self._executable)
        if exe is None:
            raise ToolUnavailableError(self._executable)

        output_path = self._create_output_file()
        try:
            await self._run_process(self.build_command(exe, url, output_path))
            raw = self._read_output(output_path)
            report = ValidationReport.parse_output(raw)
            if report.is_empty():
                raise ReportParseError("validator wrote an empty report")
            return report
        finally:
            self._remove_output_file(output_path)

    def _create_output_file(self) -> str:
        try:
            fd, path = tempfile.mkstemp(prefix="msv-", suffix=".json", dir=self._temp_dir)
        except OSError as e:
            raise ResourceAcquisitionError(str(e)) from e
        os.close(fd)
        return path

    @staticmethod
    def _remove_output_file(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except IsADirectoryError:
            shutil.rmtree(path, ignore_errors=True)
        except OSError as e:
            logger.error("Could not remove validation output %s: %s", path, e)

    @staticmethod
    def _read_output(path: str) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise OutputReadError(path, str(e)) from e

    async def _run_process(self, command: List[str]) -> None:
        logger.debug("Running %s", " ".join(command))
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ProcessFailureError(stderr=str(e)) from e

        # The tool enforces -t itself; this is the hard stop if it does not
        deadline = self._timeout_seconds + self._kill_grace_seconds
        try:
            _, stderr = await asyncio.wait_for(proc.communicate(), timeout=deadline)
        except asyncio.TimeoutError:
            await _kill(proc)
            raise ProcessFailureError(timed_out=True) from None
        except asyncio.CancelledError:
            await _kill(proc)
            raise

        if proc.returncode != 0:
            tail = stderr.decode("utf-8", errors="replace")[-_STDERR_TAIL_CHARS:]
            logger.debug("Validator stderr: %s", tail)
            raise ProcessFailureError(returncode=proc.returncode, stderr=tail)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()
