import threading

import pytest

from app.jobs.errors import (
    InvalidStateTransitionError,
    JobNotFoundError,
    JobStoreNotInitializedError,
)
from app.jobs.models import Job, JobStatus
from app.jobs.report import ValidationReport
from app.jobs.store import JobStore


def test_store_must_be_initialized():
    store = JobStore()
    assert not store.initialized
    with pytest.raises(JobStoreNotInitializedError):
        store.list()
    with pytest.raises(JobStoreNotInitializedError):
        store.append(Job(url="https://example.com/a.m3u8"))


def test_initialize_is_idempotent():
    store = JobStore()
    store.initialize()
    store.append(Job(url="https://example.com/a.m3u8"))
    store.initialize()
    assert len(store) == 1


def test_concurrent_initialize_builds_one_collection():
    store = JobStore()
    barrier = threading.Barrier(8)

    def init():
        barrier.wait()
        store.initialize()

    threads = [threading.Thread(target=init) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    collection = store._jobs
    store.initialize()
    assert store._jobs is collection


def test_append_then_get_and_list(store):
    job = Job(url="https://example.com/a.m3u8")
    store.append(job)

    assert store.get(job.id) == job
    assert store.list() == [job]
    assert store.get("missing") is None
    with pytest.raises(JobNotFoundError):
        store.get_or_raise("missing")


def test_duplicate_id_rejected(store):
    job = Job(url="https://example.com/a.m3u8")
    store.append(job)
    with pytest.raises(ValueError):
        store.append(job)


def test_list_keeps_creation_order(store):
    jobs = [Job(url=f"https://example.com/{n}.m3u8") for n in range(5)]
    for job in jobs:
        store.append(job)
    assert [j.id for j in store.list()] == [j.id for j in jobs]


def test_concurrent_appends_are_all_visible(store):
    def add_many():
        for n in range(200):
            store.append(Job(url=f"https://example.com/{n}.m3u8"))

    threads = [threading.Thread(target=add_many) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    jobs = store.list()
    assert len(jobs) == 800
    assert len({j.id for j in jobs}) == 800


def test_transition_replaces_snapshot(store):
    job = Job(url="https://example.com/a.m3u8")
    store.append(job)

    processing = store.transition(job.id, JobStatus.PROCESSING)
    assert processing.status == JobStatus.PROCESSING
    assert processing.end_time is None
    # Earlier snapshots are untouched
    assert job.status == JobStatus.QUEUED

    report = ValidationReport(playlist_kind="Media")
    done = store.transition(job.id, JobStatus.COMPLETED, report=report)
    assert done.report == report
    assert done.end_time is not None
    assert done.end_time >= done.start_time
    assert store.get(job.id) == done


def test_terminal_job_cannot_move(store):
    job = Job(url="https://example.com/a.mpd")
    store.append(job)
    store.transition(job.id, JobStatus.SKIPPED)

    with pytest.raises(InvalidStateTransitionError):
        store.transition(job.id, JobStatus.PROCESSING)
    assert store.get(job.id).status == JobStatus.SKIPPED


def test_transition_unknown_job(store):
    with pytest.raises(JobNotFoundError):
        store.transition("missing", JobStatus.PROCESSING)
