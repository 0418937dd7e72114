"""Top-level API router aggregating all v1 sub-routers."""

from __future__ import annotations

from fastapi import APIRouter

from flowform.api.v1.assessments import router as assessments_router
from flowform.api.v1.flows import router as flows_router
from flowform.api.v1.health import router as health_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health_router)
api_router.include_router(flows_router)
api_router.include_router(assessments_router)
