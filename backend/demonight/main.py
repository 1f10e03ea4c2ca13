from __future__ import annotations
import time
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from demonight.config import settings
from demonight.db import engine
from demonight.logging_setup import configure_logging
from demonight.models.vote import VOTE_INCREMENT
from demonight.routes.system import router as system_router
from demonight.routes.auth import router as auth_router
from demonight.routes.events import router as events_router
from demonight.routes.votes import router as votes_router
from demonight.routes.matches import router as matches_router
import structlog

configure_logging()
log = structlog.get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(
        "startup",
        version=settings.app_version,
        git_sha=settings.git_sha,
        budget_cap=settings.vote_budget_cap,
        vote_increment=VOTE_INCREMENT,
    )
    yield
    await engine.dispose()
    log.info("shutdown")

app = FastAPI(
    title=f"{settings.app_display_name} API",
    version=settings.app_version,
    lifespan=lifespan,
    description=f"{settings.app_display_name} API: award voting, pitch-night investing and head-to-head matches",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment == "dev" else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

for router in (system_router, auth_router, events_router, votes_router, matches_router):
    app.include_router(router)

@app.middleware("http")
async def request_context(request: Request, call_next):
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = rid
    structlog.contextvars.bind_contextvars(request_id=rid)
    started = time.perf_counter()
    try:
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        # results are polled every few seconds during a match; keep those out of info logs
        level = "debug" if request.method == "GET" else "info"
        getattr(log, level)(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response
    finally:
        structlog.contextvars.clear_contextvars()
