"""Job management API — submit stream URLs, list jobs, poll status."""

from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from app.jobs.errors import JobNotFoundError, JobQueueFullError
from app.jobs.models import Job

router = APIRouter()

# Set by main.py during lifespan
_service = None


def set_service(service):
    global _service
    _service = service


def current_service():
    return _service


def get_service():
    if _service is None:
        raise HTTPException(status_code=503, detail="Job service not initialized")
    return _service


class JobCreateRequest(BaseModel):
    url: str


@router.post("/jobs", response_model=Job, status_code=201)
async def create_job(request: JobCreateRequest):
    """Queue a stream URL for validation. Poll GET /api/v1/jobs/{id} for the result."""
    service = get_service()
    try:
        return service.create_job(request.url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except JobQueueFullError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/jobs", response_model=List[Job])
async def list_jobs():
    return get_service().list_jobs()


@router.get("/jobs/{job_id}", response_model=Job)
async def get_job(job_id: str):
    """Current snapshot of a job; ``report`` is present once it completes."""
    try:
        return get_service().get_job(job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
