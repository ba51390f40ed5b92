"""
Courseware Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(settings) returns a configured FastAPI
       instance with its own Database on `app.state.database`.
Who:   Called by uvicorn (`uvicorn courseware.main:app`), by the `courseware`
       console script, and by tests with their own Settings.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:                                            │
    │    POST /api/courses   GET /api/courses             │
    │    GET /api/courses/{id}   GET /health              │
    │                                                     │
    │  Exception Handlers:                                │
    │    NotFoundError→404    ValidationError→500         │
    │    StorageError→500     Exception→500               │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, create missing tables, log readiness
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from courseware import __version__
from courseware.config import Settings, settings as default_settings
from courseware.database import Database
from courseware.exceptions import (
    CoursewareError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from courseware.middleware.logging import RequestLoggingMiddleware
from courseware.middleware.request_id import RequestIDMiddleware, request_id_var
from courseware.routes import courses, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before any other initialization.
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Containers capture stdout
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Run startup work before `yield` and shutdown work after it.

    Tables are created with `create_all` at startup; there is no migration
    tooling, so columns added to an existing table must be applied by hand.
    """
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Courseware Backend starting up...")

    try:
        await database.create_all()
    except Exception:
        logger.exception("Could not prepare database tables; aborting startup")
        await database.dispose()
        raise

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Courseware Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP status codes and JSON envelopes.

    Handler hierarchy:
        NotFoundError        → 404 Not Found
        ValidationError      → 500 Internal Server Error (subclass of StorageError)
        StorageError         → 500 Internal Server Error (underlying message)
        CoursewareError      → 500 Internal Server Error
        Exception (fallback) → 500 Internal Server Error (generic message)
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Payload could not be coerced to the resource definition."""
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=500,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        """Missing id, or an empty listing."""
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        """Storage collaborator failed; the body carries its failure message."""
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "storage_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(CoursewareError)
    async def handle_application_error(request: Request, exc: CoursewareError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for unexpected errors.

        The stack trace is logged server-side only; the client gets a generic
        message and the request id.
        """
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to use (defaults to the environment-loaded singleton)
        database: Pre-built Database (defaults to one built from `settings`)

    Returns:
        Fully configured FastAPI instance ready to receive requests.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Courseware API",
        description="Create, list and fetch courses through a uniform resource API.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database or Database(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added runs first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(courses.router, prefix=settings.api_prefix)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the app on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "courseware.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )


# uvicorn expects `courseware.main:app` to be importable
app = create_app()
