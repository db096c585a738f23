"""Aggregate all v1 API routers."""

from fastapi import APIRouter
from app.api.v1.health import router as health_router
from app.api.v1.jobs import router as jobs_router
from app.api.v1.contents import router as contents_router

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(jobs_router, tags=["jobs"])

# Compatibility shim — mounts /contents and /contents/{id} at root
contents_router_compat = APIRouter()
contents_router_compat.include_router(contents_router, tags=["contents"])
