"""
ComicShelf Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn comicshelf.main:app, or python -m comicshelf).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────┐          │
    │  │ Req ID   │→│  Logging        │→│ CORS │          │
    │  └──────────┘ └─────────────────┘ └──────┘          │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────┐ ┌──────────────┐ ┌───────┐ ┌──────┐ │
    │  │ /api/years │ │ /api/strips/ │ │/comics│ │health│ │
    │  └────────────┘ └──────────────┘ └───────┘ └──────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ NotFound→404 │ StreamOpen→500 │ Other→500     │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Open the archive            (ArchiveOpenError → process exits)
    3. Scan it into a StripIndex   (EmptyIndexError  → process exits)
    4. Store the index on app.state; only now does uvicorn accept traffic

    Shutdown:
    1. Close the archive handle
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from comicshelf import __version__
from comicshelf.config import settings
from comicshelf.exceptions import (
    ArchiveOpenError,
    ComicShelfError,
    EmptyIndexError,
    NotFoundError,
    StreamOpenError,
)
from comicshelf.middleware.logging import RequestLoggingMiddleware
from comicshelf.middleware.request_id import RequestIDMiddleware, request_id_var
from comicshelf.routes import comics, health, strips
from comicshelf.services.archives import open_archive
from comicshelf.services.index_service import StripIndex, build_index

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

    Per-entry scan rejections are logged at INFO by
    comicshelf.services.classifier, so a large messy archive produces one
    line per skipped member at startup.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("py7zr").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

def load_index(archive_path: str):
    """
    Open an archive and scan it into a StripIndex.

    Returns:
        (source, index). The source stays open: indexed entries read from it.

    Raises:
        ArchiveOpenError: The archive could not be opened.
        EmptyIndexError:  No entry in the archive is a valid strip.
    """
    source = open_archive(archive_path)
    try:
        index = build_index(source)
    except EmptyIndexError:
        source.close()
        raise
    return source, index


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build the strip index before serving, release the archive afterwards.

    Startup failures are logged and re-raised: uvicorn then aborts startup
    and the process exits without ever accepting a connection.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("ComicShelf Backend %s starting up...", __version__)

    source = None
    if getattr(app.state, "strip_index", None) is None:
        try:
            source, index = load_index(settings.archive_path)
        except ArchiveOpenError as e:
            logger.error("Unable to open archive %s: %s", settings.archive_path, e.message)
            raise
        except EmptyIndexError as e:
            logger.error("%s: %s", e.message, settings.archive_path)
            raise
        app.state.strip_index = index
        app.state.archive_path = settings.archive_path

    index = app.state.strip_index
    logger.info(
        "Serving %d comic strips from %d years at http://%s:%d",
        index.strip_count,
        len(index.list_years()),
        settings.host,
        settings.port,
    )
    logger.info("=" * 60)

    yield

    logger.info("ComicShelf Backend shutting down...")
    if source is not None:
        source.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to JSON error responses.

    Handler hierarchy:
        NotFoundError       → 404 Not Found (no error log; access log has it)
        StreamOpenError     → 500 Internal Server Error
        ComicShelfError     → 500 Internal Server Error
        Exception           → 500 Internal Server Error

    Exception context (archive paths, OS errors) is logged server-side and
    never returned to the client.
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(StreamOpenError)
    async def handle_stream_open_error(request: Request, exc: StreamOpenError):
        rid = request_id_var.get("")
        logger.error("[%s] Stream open error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(ComicShelfError)
    async def handle_app_error(request: Request, exc: ComicShelfError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(index: Optional[StripIndex] = None, archive_path: str = "") -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        index: A prebuilt StripIndex. When given, the lifespan skips the
               archive scan (used by tests and embedding callers).
        archive_path: Reported by /health alongside an injected index.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="ComicShelf API",
        description=(
            "Serves dated comic strip images straight out of a compressed archive, "
            "with per-year listings of every strip found."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.strip_index = index
    app.state.archive_path = archive_path

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(strips.router)
    app.include_router(comics.router)
    app.include_router(health.router)

    return app


# uvicorn expects `comicshelf.main:app` to be importable
app = create_app()
