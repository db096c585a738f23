"""HTTP client for the stream validator service.

Talks to the ``/contents`` routes, so it works against any deployment that
exposes them. Jobs come back as plain dicts in that wire shape.
"""

import time
from typing import Any, Dict, List, Optional

import httpx

from app.jobs.state import TERMINAL_JOB_STATES

TERMINAL_STATUSES = frozenset(status.value for status in TERMINAL_JOB_STATES)


class StreamValidatorClientError(Exception):
    """Raised when the service answers with an unexpected status code."""

    def __init__(self, method: str, path: str, status_code: int, body: str):
        self.method = method
        self.path = path
        self.status_code = status_code
        self.body = body
        super().__init__(f"{method} {path} returned {status_code}: {body[:200]}")


class StreamValidatorClient:
    """Submit streams for validation and poll for their reports.

    Pass ``http_client`` to reuse a configured httpx.Client (its base_url is
    used as-is); otherwise one is created for ``base_url``.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:3001",
        http_client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "StreamValidatorClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, expected: int, **kwargs) -> Any:
        response = self._http.request(method, path, **kwargs)
        if response.status_code != expected:
            raise StreamValidatorClientError(method, path, response.status_code, response.text)
        return response.json()

    def post(self, url: str) -> Dict[str, Any]:
        """Queue ``url`` for validation and return the new job."""
        return self._request("POST", "/contents", 201, json={"url": url})

    def get(self, job_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/contents/{job_id}", 200)

    def get_all(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/contents", 200)

    def wait_for_terminal(
        self,
        job_id: str,
        interval: float = 10.0,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Poll a job until it is skipped, completed, or errored.

        Raises:
            TimeoutError: If ``timeout`` seconds pass first
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            job = self.get(job_id)
            if job["status"] in TERMINAL_STATUSES:
                return job
            if deadline is not None and time.monotonic() >= deadline:
                raise TimeoutError(f"Job {job_id} still {job['status']} after {timeout}s")
            time.sleep(interval)
