"""
Conduit Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn conduit.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Rate Limit  │→│ Req ID   │→│  Logging        │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes (under API_PREFIX):                         │
    │  ┌───────┐ ┌──────────┐ ┌──────────┐ ┌──────────┐   │
    │  │ users │ │ profiles │ │ articles │ │ comments │   │
    │  └───────┘ └──────────┘ └──────────┘ └──────────┘   │
    │  ┌──────┐   + GET /health (no prefix)               │
    │  │ tags │                                           │
    │  └──────┘                                           │
    │                                                     │
    │  Exception Handlers → {"errors": {...}}             │
    └─────────────────────────────────────────────────────┘

Error Envelope:
    Every error response, whatever raised it, has the shape
        {"errors": {"message": "..."}}            or
        {"errors": {"<field>": ["...", ...]}}     (422 validation)
"""

import logging
import re
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from conduit import __version__
from conduit.config import settings
from conduit.database import dispose_engine
from conduit.exceptions import ConduitError, DatabaseError, RateLimitExceededError
from conduit.middleware.logging import RequestLoggingMiddleware
from conduit.middleware.rate_limit import RateLimitMiddleware
from conduit.middleware.request_id import RequestIDMiddleware, request_id_var
from conduit.routes import articles, comments, health, profiles, tags, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s to stdout,
    level from settings.log_level.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party loggers that are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, warn about insecure settings.
    Shutdown: dispose the engine (close pooled connections).

    The schema itself is managed by Alembic (`alembic upgrade head`).
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Conduit Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: local development runs on the default secret
        logger.warning("Configuration warning: %s", str(e))

    logger.info("API mounted at %s", settings.api_prefix or "/")
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Conduit Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

# "UNIQUE constraint failed: users.email" (SQLite)
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: \w+\.(\w+)")
# "Key (email)=(a@b.c) already exists." (PostgreSQL)
_POSTGRES_KEY = re.compile(r"Key \((\w+)\)=")

TAKEN = "has already been taken"


def _error_response(status_code: int, errors: Dict[str, Any], **kwargs) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"errors": errors}, **kwargs)


def flatten_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """
    Collapses Pydantic errors into {<field>: [<message>, ...]}.

    The field is the last named element of the error location, so
    ("body", "user", "username") → "username" and ("query", "limit") → "limit".
    Field-rule errors carry every broken rule in ctx["messages"].
    """
    flattened: Dict[str, List[str]] = {}
    for error in errors:
        names = [part for part in error.get("loc", ()) if isinstance(part, str)]
        field = names[-1] if names else "body"
        ctx = error.get("ctx") or {}
        messages = ctx.get("messages") or [error.get("msg", "Invalid value")]
        bucket = flattened.setdefault(field, [])
        for message in messages:
            if message not in bucket:
                bucket.append(message)
    return flattened


def _conduit_error_response(exc: ConduitError) -> JSONResponse:
    rid = request_id_var.get("")
    if exc.status_code >= 500:
        logger.error("[%s] %s: %s | Context: %s",
                     rid, type(exc).__name__, exc.message, exc.context)
    else:
        logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)

    headers = None
    if isinstance(exc, RateLimitExceededError):
        headers = {"Retry-After": str(exc.retry_after)}
    return _error_response(exc.status_code, exc.to_errors(), headers=headers)


def integrity_error_field(exc: IntegrityError) -> str:
    """Names the column a constraint violation refers to, when the driver says."""
    text = str(exc.orig)
    for pattern in (_SQLITE_UNIQUE, _POSTGRES_KEY):
        match = pattern.search(text)
        if match:
            return match.group(1)
    return "message"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ConduitError (and subclasses) → its status_code, to_errors() body
        RequestValidationError        → 422, field-mapped
        IntegrityError                → 422, {<column>: ["has already been taken"]}
        SQLAlchemyError (other)       → 500 via DatabaseError
        StarletteHTTPException        → its status ("Not found" for 404)
        Exception (fallback)          → 500 "Internal server error"

    Exception handlers never expose internal details (stack traces, SQL) in
    the response. Details are logged server-side.
    """

    @app.exception_handler(ConduitError)
    async def handle_conduit_error(request: Request, exc: ConduitError):
        return _conduit_error_response(exc)

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        """Driver/ORM failures other than constraint violations; details stay in the log."""
        error = DatabaseError(
            context={"error": type(exc).__name__, "detail": str(exc)}
        )
        return _conduit_error_response(error)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """The request never reached a service; report every failing field."""
        rid = request_id_var.get("")
        errors = flatten_validation_errors(exc.errors())
        logger.warning("[%s] Request validation failed: %s", rid, list(errors))
        return _error_response(422, errors)

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        """A uniqueness race lost at the database; same shape as the service check."""
        rid = request_id_var.get("")
        logger.warning("[%s] Integrity error: %s", rid, str(exc.orig))
        return _error_response(422, {integrity_error_field(exc): [TAKEN]})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Unmatched routes, wrong methods, and other framework-level errors."""
        message = "Not found" if exc.status_code == 404 else str(exc.detail)
        return _error_response(
            exc.status_code,
            {"message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all; the stack trace is logged, never returned."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error_response(500, {"message": "Internal server error"})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Conduit API",
        description=(
            "Social blogging platform: users, profiles, articles, comments, "
            "tags, favorites and follows."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RateLimit → RequestID → Logging → GZip → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        # Browsers reject credentialed requests to a wildcard origin
        allow_credentials=settings.cors_origins_list != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    for module in (users, profiles, articles, comments, tags):
        app.include_router(module.router, prefix=settings.api_prefix)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "conduit.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
