"""Helpers shared by test modules."""

import os
import time
from pathlib import Path


def calls_made(script: Path):
    log = script.parent / "calls.log"
    if not log.exists():
        return []
    return log.read_text().splitlines()


def wait_until(predicate, timeout: float = 10.0, interval: float = 0.05):
    """Poll ``predicate`` until it returns a truthy value or time runs out."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        result = predicate()
        if result:
            return result
        time.sleep(interval)
    raise AssertionError("condition not met before timeout")


def dir_is_empty(path) -> bool:
    return not os.listdir(path)
