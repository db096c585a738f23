"""Compatibility API for existing stream validator clients.

Provides the three paths older clients use:
  POST /contents          — submit {"url": ...}, returns the queued job
  GET  /contents          — every job
  GET  /contents/{id}     — one job, or {"message": "content not found"}

Jobs are rendered with the report under ``validation_info``. This is a thin
layer over the /api/v1/jobs service.
"""

from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from app.api.v1.jobs import JobCreateRequest, get_service
from app.jobs.errors import JobNotFoundError, JobQueueFullError
from app.jobs.models import Job

router = APIRouter()


def content_view(job: Job) -> Dict[str, Any]:
    view = {
        "id": job.id,
        "url": job.url,
        "validation_info": (
            job.report.model_dump(mode="json", by_alias=True) if job.report else {}
        ),
        "status": job.status.value,
        "start_time": job.start_time.isoformat(),
        "end_time": job.end_time.isoformat() if job.end_time else None,
    }
    if job.error:
        view["error"] = job.error
    return view


@router.post("/contents", status_code=201)
async def post_content(request: JobCreateRequest):
    service = get_service()
    try:
        job = service.create_job(request.url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except JobQueueFullError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return content_view(job)


@router.get("/contents")
async def get_contents():
    return [content_view(job) for job in get_service().list_jobs()]


@router.get("/contents/{content_id}")
async def get_content(content_id: str):
    try:
        job = get_service().get_job(content_id)
    except JobNotFoundError:
        return JSONResponse(status_code=404, content={"message": "content not found"})
    return content_view(job)
