# mentor/api/app.py
from typing import Optional
import logging
import math

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config.settings import Settings, get_settings
from ..core.errors import MentorError, RateLimited
from ..pipeline.orchestrator import StudyPipeline, build_pipeline
from .routes import router
from .ratelimit import RateLimiter
from .store import InMemoryResultStore, ResultStore

logger = logging.getLogger(__name__)


async def mentor_error_handler(request: Request, exc: MentorError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed ({exc.kind}): {exc.message} {exc.detail or ''}".rstrip())
    headers = None
    if isinstance(exc, RateLimited):
        headers = {"Retry-After": str(math.ceil(exc.retry_after))}
    return JSONResponse(status_code=exc.http_status, content=exc.to_payload(), headers=headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.url.path} crashed")
    return JSONResponse(status_code=500, content={"error": "Something went wrong!", "kind": "internal"})


def create_app(
    settings: Optional[Settings] = None,
    pipeline: Optional[StudyPipeline] = None,
    store: Optional[ResultStore] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    cfg = settings or get_settings()

    app = FastAPI(
        title="Study Mentor API",
        description="Resource curation and study plan generation",
        version="1.0.0",
    )
    app.state.settings = cfg
    app.state.pipeline = pipeline or build_pipeline(cfg)
    app.state.store = store or InMemoryResultStore()
    app.state.rate_limiter = rate_limiter or RateLimiter(cfg.rate_limit_max, cfg.rate_limit_window_s)

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "x-auth-token"],
    )

    app.add_exception_handler(MentorError, mentor_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(router)
    return app
