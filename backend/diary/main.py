"""
Diary Backend — FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() wires Database → EntryRepository →
       EntryService, registers middleware, exception handlers and routes,
       and returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn diary.main:app) and by the test fixtures.
When:  Once at server startup; the returned app handles all requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────┐ ┌──────┐ │
    │  │ Req ID   │→│  Logging        │→│ GZip │→│ CORS │ │
    │  └──────────┘ └─────────────────┘ └──────┘ └──────┘ │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────┐ ┌─────────────────┐   │
    │  │ /api/entries CRUD+search │ │ GET /health     │   │
    │  └──────────────────────────┘ └─────────────────┘   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ anything→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create the SQLite data directory if needed
    3. Create the entries table and index if missing

    Shutdown:
    1. Dispose the database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from diary import __version__
from diary.config import Settings, settings as default_settings
from diary.database import Database
from diary.exceptions import (
    INTERNAL_ERROR_MESSAGE,
    DiaryError,
    ValidationError,
    status_code_for,
)
from diary.middleware.logging import RequestLoggingMiddleware
from diary.middleware.request_id import RequestIDMiddleware, request_id_var
from diary.repositories.entry_repository import EntryRepository
from diary.routes import entries, health
from diary.services.entry_service import EntryService

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Validation Error"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Per-request and per-statement logs come from our own middleware instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifecycle: startup and shutdown procedures.

    Code before yield runs on startup, code after yield on shutdown.
    """
    config: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("Diary Backend %s starting up...", __version__)

    data_dir = database.ensure_storage_directory()
    if data_dir is not None:
        logger.info("Data directory: %s", data_dir)
    await database.create_schema()

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Diary Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def format_request_errors(errors: List[dict]) -> List[str]:
    """
    Turn pydantic/FastAPI request errors into "'<field>': <reason>" lines.

    The location prefix (body/query/path) and list positions are dropped;
    pydantic's "Value error, " prefix is stripped from custom messages.
    """
    details = []
    for error in errors:
        loc = [
            str(part) for part in error.get("loc", ())
            if isinstance(part, str) and part not in ("body", "query", "path")
        ]
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        field = ".".join(loc)
        details.append(f"'{field}': {message}" if field else message)
    return details


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RequestValidationError  → 400 (bad JSON body / wrong field types)
        DiaryError              → status_code_for(exc)
        HTTPException           → its own status ("Invalid ID format", 404, 405)
        Exception (fallback)    → 500

    Error body: {"message": str, "details"?: [str]}. 500 responses never
    contain exception text; details are logged server-side.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        details = format_request_errors(exc.errors())
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), details)
        return JSONResponse(
            status_code=400,
            content={"message": VALIDATION_MESSAGE, "details": details},
        )

    @app.exception_handler(DiaryError)
    async def handle_diary_error(request: Request, exc: DiaryError):
        rid = request_id_var.get("")
        status = status_code_for(exc)

        if isinstance(exc, ValidationError):
            logger.warning("[%s] Validation error: %s", rid, exc.detail)
            return JSONResponse(
                status_code=status,
                content={"message": VALIDATION_MESSAGE, "details": [exc.detail]},
            )

        if status == 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
            return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})

        return JSONResponse(status_code=status, content={"message": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for errors raised outside RequestIDMiddleware.

        Errors from routes are rendered by RequestIDMiddleware first, while
        the request ID is still set. The stack trace is logged, never returned.
        """
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config:    Settings to use (defaults to the module-level settings)
        database:  Store handle to use (defaults to one built from config).
                   Tests pass an in-memory Database here.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    config = config or default_settings
    database = database or Database(config=config)

    app = FastAPI(
        title="Diary API",
        description="Personal diary: create, list, view, edit, delete and search dated entries.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Wire the layers ───────────────────────────────────────────────────
    app.state.settings = config
    app.state.database = database
    app.state.entry_service = EntryService(EntryRepository(database))

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
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
    app.include_router(entries.router)
    app.include_router(health.router)

    return app


# uvicorn expects `diary.main:app` to be importable
app = create_app()
