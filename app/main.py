"""Stream Validator Service - FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import Tuple

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, settings
from app.logging_config import configure_logging
from app.api.v1.router import v1_router, contents_router_compat
from app.api.v1.health import router as health_root_router
from app.api.v1 import jobs as jobs_api
from app.jobs.in_process_queue import InProcessQueue
from app.jobs.service import JobService
from app.jobs.store import JobStore
from app.validation.runner import ValidationRunner

logger = logging.getLogger(__name__)


def build_job_service(config: Settings) -> Tuple[JobService, InProcessQueue]:
    """Wire store, runner, worker pool, and service from configuration.

    The store is initialized here, before any request can reach it.
    """
    store = JobStore()
    store.initialize()

    runner = ValidationRunner(
        store,
        executable=config.validator_executable,
        timeout_seconds=config.validator_timeout_seconds,
        kill_grace_seconds=config.validator_kill_grace_seconds,
        temp_dir=config.validator_temp_dir,
        skip_suffixes=config.skip_suffixes,
    )

    def on_crash(job_id: str, exc: BaseException) -> None:
        service.fail_job(job_id, f"{type(exc).__name__}: {exc}")

    def on_drop(job_id: str) -> None:
        service.fail_job(job_id, "Service shut down before validation finished")

    dispatcher = InProcessQueue(
        worker_fn=runner.run,
        concurrency=config.max_concurrent_validations,
        max_queue_size=config.max_queue_size,
        on_crash=on_crash,
        on_drop=on_drop,
    )
    service = JobService(store, dispatcher, runner)
    return service, dispatcher


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    configure_logging(settings.log_level)

    logger.info("Starting %s on port %d", settings.service_name, settings.port)
    logger.info(
        "Validator: %s (timeout %ds, %d concurrent)",
        settings.validator_executable,
        settings.validator_timeout_seconds,
        settings.max_concurrent_validations,
    )

    service, dispatcher = build_job_service(settings)
    await dispatcher.start()

    # Wire the service into API endpoints
    jobs_api.set_service(service)

    yield

    logger.info("Shutting down %s", settings.service_name)
    jobs_api.set_service(None)
    await dispatcher.stop()


app = FastAPI(
    title="Stream Validator Service",
    description="Asynchronous HLS stream conformance checks backed by mediastreamvalidator",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(health_root_router, tags=["health"])  # GET /health at root
app.include_router(v1_router)  # All /api/v1/* endpoints
app.include_router(contents_router_compat)  # /contents compat layer


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
