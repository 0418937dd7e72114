"""FastAPI application factory with lifespan events."""

from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from flowform.api.dependencies import set_admission_counter
from flowform.api.router import api_router
from flowform.config import get_settings
from flowform.services.admission import AdmissionCounter
from flowform.utils.exceptions import FlowformError, RunStateError
from flowform.utils.logging import bind_request_context, get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the admission counter for the app's lifetime."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    counter = AdmissionCounter(settings.REDIS_URL, key_prefix=settings.ADMISSION_KEY_PREFIX)
    set_admission_counter(counter)
    try:
        await counter.ping()
    except Exception as exc:
        # Not fatal: the flow endpoints work without Redis; /ready reports it
        logger.warning("redis_unavailable", error=str(exc))

    logger.info("app_started", admission_prefix=settings.ADMISSION_KEY_PREFIX)
    yield

    await counter.close()
    set_admission_counter(None)
    logger.info("app_stopped")


def _register_error_handlers(application: FastAPI) -> None:
    @application.exception_handler(FlowformError)
    async def flowform_error_handler(request: Request, exc: FlowformError) -> JSONResponse:
        status_code = 400 if isinstance(exc, RunStateError) else 422
        logger.warning("request_rejected", error=str(exc), type=type(exc).__name__)
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "type": type(exc).__name__},
        )

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "type": type(exc).__name__},
        )


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    application = FastAPI(
        title="FlowForm",
        description="Branching questionnaire flow engine",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(api_router)

    @application.middleware("http")
    async def request_context_middleware(request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        bind_request_context(request_id, path=request.url.path)
        started = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.debug(
            "request_completed",
            method=request.method,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response

    _register_error_handlers(application)
    return application


app = create_app()
