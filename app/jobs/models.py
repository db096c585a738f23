"""Job record data model for async stream validation."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
import uuid

from app.jobs.report import ValidationReport


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    SKIPPED = "skipped"
    COMPLETED = "completed"
    ERROR = "error"


class Job(BaseModel):
    """Tracks the lifecycle of one validation request.

    Instances are snapshots: the store swaps in a new copy on every status
    change, so a Job handed to a reader never changes underneath it.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    url: str
    status: JobStatus = JobStatus.QUEUED
    start_time: datetime = Field(default_factory=utcnow)
    end_time: Optional[datetime] = None
    report: Optional[ValidationReport] = None
    error: Optional[str] = None
