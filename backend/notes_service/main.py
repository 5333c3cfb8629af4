"""
Notes Service — FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() resolves configuration, builds the token verifier, and
       registers middleware, exception handlers and routers.
Who:   uvicorn (`uvicorn notes_service.main:app`, or the `notes-service` script).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:   Request ID → Logging → CORS          │
    │                                                     │
    │  Routes:       /api/notes (bearer)   /health        │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ Auth→401 │ NotFound→404 │ DB→500  │
    └─────────────────────────────────────────────────────┘

Startup fails (ConfigurationError) when no signing secret is configured; see
Settings.resolve_jwt_secret.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notes_service import __version__
from notes_service.auth.dependencies import authenticate_request
from notes_service.auth.tokens import TokenVerifier
from notes_service.config import Settings, settings as default_settings
from notes_service.database import dispose_engine
from notes_service.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotesServiceError,
    NotFoundError,
    ValidationError,
)
from notes_service.middleware.logging import RequestLoggingMiddleware
from notes_service.middleware.request_id import RequestIDMiddleware, request_id_var
from notes_service.routes import health, notes

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Called once from the app factory, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Notes Service %s ready", __version__)

    yield

    logger.info("Notes Service shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _unauthorized(exc: AuthenticationError) -> JSONResponse:
    return _error(401, exc.message, headers={"WWW-Authenticate": "Bearer"})


def describe_validation_error(exc: RequestValidationError) -> str:
    """
    Turn FastAPI's validation error list into one client-facing sentence.

        path parameter       → "Invalid note ID"
        body not JSON/object → "Invalid request body"
        body field           → "Invalid value for 'title': <reason>"
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    loc = tuple(first.get("loc", ()))
    if loc and loc[0] == "path":
        return "Invalid note ID"
    if first.get("type") == "json_invalid" or loc in (("body",), ()):
        return "Invalid request body"

    field = loc[-1] if loc else "body"
    if first.get("type") == "missing":
        return f"Missing required field '{field}'"
    return f"Invalid value for '{field}': {first.get('msg', 'invalid')}"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and `{"error": ...}` bodies.

    Handler hierarchy:
        RequestValidationError  → 400
        ValidationError         → 400
        AuthenticationError     → 401 (+ WWW-Authenticate: Bearer)
        NotFoundError           → 404
        DatabaseError           → 500 (details logged only)
        NotesServiceError       → 500
        Exception               → 500 (traceback logged only)
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        # The body is parsed before the bearer dependency runs
        if request.url.path.startswith(API_PREFIX):
            try:
                authenticate_request(request)
            except AuthenticationError as auth_exc:
                return _unauthorized(auth_exc)

        message = describe_validation_error(exc)
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return _error(400, message)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error(400, exc.message)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _unauthorized(exc)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error(500, exc.message)

    @app.exception_handler(NotesServiceError)
    async def handle_service_error(request: Request, exc: NotesServiceError):
        logger.error("[%s] Service error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error(500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=exc,
        )
        return _error(500, "Internal server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to build from; the module-level singleton by default.
                Tests pass their own to exercise secret resolution.

    Raises:
        ConfigurationError: no usable signing secret.
    """
    config = config or default_settings
    setup_logging(config.log_level)

    # Fail before serving anything if the secret is missing
    verifier = TokenVerifier(
        secret=config.resolve_jwt_secret(),
        require_exp=config.jwt_require_exp,
    )

    app = FastAPI(
        title="Notes Service API",
        description="CRUD API for notes, gated by HS256 bearer tokens.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.token_verifier = verifier

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = outermost; execution order is RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured address."""
    import uvicorn

    uvicorn.run(
        "notes_service.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


# uvicorn expects `notes_service.main:app` to be importable
app = create_app()
