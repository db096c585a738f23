"""Health check endpoint."""

from fastapi import APIRouter
import platform
import shutil
import sys

from app.api.v1 import jobs as jobs_api
from app.config import settings
from app.jobs.report import REPORT_SCHEMA_VERSION

router = APIRouter()


@router.get("/health")
async def health_check():
    """Service health, validator availability, and job counts."""
    validator_path = shutil.which(settings.validator_executable)
    service = jobs_api.current_service()

    return {
        "status": "healthy" if service is not None else "starting",
        "service": settings.service_name,
        "validator": {
            "executable": settings.validator_executable,
            "available": validator_path is not None,
            "path": validator_path,
        },
        "jobs": service.summary() if service is not None else {},
        "report_schema_version": REPORT_SCHEMA_VERSION,
        "python_version": sys.version,
        "platform": platform.platform(),
    }
