"""Health and readiness probe endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from flowform.api.dependencies import get_admission_counter
from flowform.services.admission import AdmissionCounter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(counter: AdmissionCounter = Depends(get_admission_counter)) -> dict:
    """Ready once Redis answers; submissions cannot be admitted without it."""
    try:
        redis_ok = await counter.ping()
    except Exception as exc:
        return {"status": "not_ready", "checks": {"redis": False}, "error": str(exc)}
    return {"status": "ready" if redis_ok else "degraded", "checks": {"redis": redis_ok}}
