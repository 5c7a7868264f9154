"""
main.py — GoRest proxy API entry point

The FastAPI application instance lives here. All middleware, routers,
exception handlers and startup/shutdown events are registered in this file.

Usage
-----
Development (auto-reloads on file save):
    cd backend
    uvicorn api.main:app --reload --port 8000

Production (multiple worker processes):
    cd backend
    gunicorn api.main:app -c gunicorn.conf.py

Docs (once running):
    http://localhost:8000/docs    Swagger UI (interactive)
    http://localhost:8000/redoc   ReDoc (read-only)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.envelope import failure, validation_failure
from api.routers.health import router as health_router
from api.v1.router import v1_router
from clients.gorest import GoRestClient
from core.config import APP_VERSION, settings
from core.errors import format_validation_errors
from core.logging import configure_logging
from core.middleware import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    TimingMiddleware,
    get_request_id,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan: startup and shutdown hooks
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ────────────────────────────────────────────────────────────────
    configure_logging(settings.log_level)
    logger.info(
        "GoRest proxy starting",
        extra={
            "environment": settings.environment,
            "version": APP_VERSION,
            "log_level": settings.log_level,
            "upstream": settings.gorest_base_url,
            "allowed_origins": settings.allowed_origins,
        },
    )
    if not settings.gorest_token:
        logger.warning("GOREST_TOKEN is not set; upstream will reject write operations")

    app.state.gorest_client = GoRestClient.from_settings(settings)
    yield
    # ── Shutdown ───────────────────────────────────────────────────────────────
    await app.state.gorest_client.aclose()
    logger.info("GoRest proxy shutting down")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="GoRest User Proxy",
    description=(
        "Server-side proxy for the GoRest user-management API. "
        "Adds bounded retries, pagination metadata and a uniform "
        "success/failure envelope for the browser client."
    ),
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Middleware  (add_middleware order matters: last added = outermost = first to
# handle incoming requests)
#
#   Execution order for a request:
#     CORS → RequestID → Timing → route handler
#   Execution order for a response:
#     route handler → Timing → RequestID → CORS
# ---------------------------------------------------------------------------

# Timing: added first so it runs innermost (after RequestID has set the ID)
app.add_middleware(TimingMiddleware)

# RequestID: stamps request.state.request_id and X-Request-ID header
app.add_middleware(RequestIDMiddleware)

# CORS: outermost so browser preflight OPTIONS requests are handled immediately
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Exception handlers: every error leaves as an envelope
# ---------------------------------------------------------------------------

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed body, path or query parameters: 400 with per-field messages."""
    messages = format_validation_errors(exc.errors(), skip=("body", "query", "path"))
    logger.info(
        "request validation failed",
        extra={"request_id": get_request_id(request), "path": request.url.path, "errors": messages},
    )
    return validation_failure(request, messages)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return the failure envelope for all HTTP errors (404, 405, etc.)."""
    return failure(request, str(exc.detail), status_code=exc.status_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: log the traceback, return clean JSON.

    Runs in ServerErrorMiddleware, outside RequestIDMiddleware, so the
    X-Request-ID header is set here.
    """
    request_id = get_request_id(request)
    logger.error(
        "unhandled exception",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "error": str(exc),
        },
        exc_info=True,
    )
    response = failure(request, "Internal server error", str(exc), status_code=500)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(health_router)            # /health, /health/upstream  (unversioned)
app.include_router(v1_router, prefix="/api/v1")


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------

@app.get("/", tags=["root"], summary="API root")
def root():
    """Confirms the API is running. Returns service name, version, and docs URL."""
    return {
        "service": "GoRest User Proxy",
        "version": APP_VERSION,
        "docs":    "/docs",
    }
