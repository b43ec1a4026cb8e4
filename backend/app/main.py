"""
Blog Backend — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                      FastAPI App                        │
    │                                                         │
    │  Middleware Chain:                                      │
    │  ┌───────────┐ ┌────────┐ ┌─────────┐ ┌──────┐          │
    │  │ Body size │→│ Req ID │→│ Logging │→│ CORS │          │
    │  └───────────┘ └────────┘ └─────────┘ └──────┘          │
    │                                                         │
    │  Routes:                                                │
    │  /api/articles   /api/categories   /   /api   /health   │
    │                                                         │
    │  Exception Handlers:                                    │
    │  Validation/Conflict→400  NotFound→404  DB/other→500    │
    └─────────────────────────────────────────────────────────┘

Error envelope:
    {"status": "error", "message": ..., "error": ...}
    `error` appears on 500 responses: the underlying message in diagnostic
    mode, "Internal server error" otherwise.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import BlogError, DatabaseError
from app.middleware.body_limit import BodySizeLimitMiddleware
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from app.routes import articles, categories, health, index

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Internal server error"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: logging and a config summary. Shutdown: release the pool."""
    setup_logging()
    logger.info("Blog backend %s starting up", __version__)
    logger.info("CORS origins: %s", ", ".join(settings.cors_origins_list) or "(none)")
    if settings.diagnostic_mode:
        logger.warning("Diagnostic mode is ON: error details are returned to clients")
    logger.info("Server is running at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Blog backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(message: str, error: Optional[str] = None) -> dict:
    body = {"status": "error", "message": message}
    if error is not None:
        body["error"] = error
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the error envelope.

        BlogError subclasses   → exc.status_code (400/404/413)
        DatabaseError          → 500, driver detail only in diagnostic mode
        RequestValidationError → 400
        HTTPException          → its own status (unknown route, bad method)
        Exception              → 500
    """

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        detail = exc.detail if settings.diagnostic_mode else GENERIC_ERROR
        return JSONResponse(status_code=500, content=error_body(exc.message, detail))

    @app.exception_handler(BlogError)
    async def handle_blog_error(request: Request, exc: BlogError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
            detail = exc.message if settings.diagnostic_mode else GENERIC_ERROR
            return JSONResponse(
                status_code=exc.status_code,
                content=error_body(exc.message, detail),
            )
        logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "path", "query"))
            message = f"Invalid value for '{field}': {first.get('msg')}" if field else first.get("msg", message)
        return JSONResponse(status_code=400, content=error_body(message))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        detail = str(exc) if settings.diagnostic_mode else GENERIC_ERROR
        return JSONResponse(
            status_code=500,
            content=error_body("An unexpected error occurred", detail),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Blog API",
        description="Backend API for the blog: articles, categories and their links.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition; last added runs first.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.max_body_size)

    register_exception_handlers(app)

    app.include_router(index.router)
    app.include_router(articles.router)
    app.include_router(categories.router)
    app.include_router(health.router)

    return app


app = create_app()
