"""
HotTakes API: FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, the terminal error handler, the
       routers and the /images static mount.
Who:   uvicorn (uvicorn hottakes.main:app) and the test client.

Application Architecture:
    Middleware (outermost first):  RequestID → Logging → GZip → CORS
    Routes:   /api/auth/*  /api/reviews/*  /images/*  /health
    Errors:   HotTakesError → status of its ErrorKind
              HTTPException → its own status, same envelope
              Exception     → 500, generic body, stack trace logged

Lifecycle:
    Startup:  logging, configuration check, storage directory
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from hottakes import __version__
from hottakes.config import settings
from hottakes.database import dispose_engine
from hottakes.exceptions import ErrorKind, HotTakesError
from hottakes.middleware.logging import RequestLoggingMiddleware
from hottakes.middleware.request_id import RequestIDMiddleware, request_id_var
from hottakes.routes import auth, health, sauces

logger = logging.getLogger(__name__)

HTTP_ERROR_TAGS = {
    400: ErrorKind.VALIDATION_FAILED.tag,
    401: ErrorKind.AUTHENTICATION_INVALID.tag,
    403: ErrorKind.FORBIDDEN.tag,
    404: ErrorKind.RESOURCE_NOT_FOUND.tag,
    405: "method_not_allowed",
    415: ErrorKind.UNSUPPORTED_MEDIA_TYPE.tag,
}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, at startup.

    Format: 2024-01-15T12:00:00 [INFO] hottakes.services.sauce_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("HotTakes API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: development runs on the default secret
        logger.error("Configuration error: %s", e)

    storage = Path(settings.storage_root)
    storage.mkdir(parents=True, exist_ok=True)
    logger.info("Image directory: %s", storage.resolve())
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("HotTakes API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Terminal Error Handler
# ══════════════════════════════════════════════════════════════════════════

def error_envelope(body: Dict[str, Any], status_code: int, headers: Any = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


def render_error(exc: HotTakesError) -> JSONResponse:
    """
    The single place an application error becomes a response.

    The kind fixes the status; 5xx are logged at ERROR with the internal
    context, 4xx at WARNING. Only to_dict() reaches the client.
    """
    rid = request_id_var.get("")
    status_code = exc.kind.status
    if status_code >= 500:
        logger.error(
            "[%s] %s (%s): %s | Context: %s",
            rid, type(exc).__name__, exc.kind.tag, exc.message, exc.context,
            exc_info=exc.__cause__ is not None,
        )
    else:
        logger.warning("[%s] %s (%s): %s", rid, type(exc).__name__, exc.kind.tag, exc.message)
    return error_envelope(exc.to_dict(), status_code)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HotTakesError)
    async def handle_hottakes_error(request: Request, exc: HotTakesError):
        return render_error(exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Framework errors (unknown route, wrong method) in the same envelope."""
        body = {
            "type": HTTP_ERROR_TAGS.get(exc.status_code, "http_error"),
            "name": "HTTPException",
            "message": str(exc.detail),
        }
        return error_envelope(body, exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        fields = [
            {
                "location": str(error["loc"][0]) if error.get("loc") else "body",
                "param": str(error["loc"][-1]) if error.get("loc") else "",
                "message": error.get("msg", "Invalid value"),
            }
            for error in exc.errors()
        ]
        body = {
            "type": ErrorKind.VALIDATION_FAILED.tag,
            "name": "ValidationFailedError",
            "message": "User inputs have invalid values.",
            "fields": fields,
        }
        return error_envelope(body, 400)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Anything unclassified: generic 500, stack trace in the server log only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        body = {
            "type": "internal_server_error",
            "name": "InternalServerError",
            "message": "An unexpected error occurred. Please try again later.",
        }
        return error_envelope(body, 500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="HotTakes API",
        description=(
            "Sauce reviews: sign up, share your favourite hot sauces with a "
            "picture, and like or dislike the ones other people posted."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=[
            "Origin",
            "X-Requested-With",
            "Content",
            "Accept",
            "Content-Type",
            "Authorization",
            "X-Request-ID",
        ],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(sauces.router)
    app.include_router(health.router)

    # Stored images, referenced by Sauce.image_url
    app.mount(
        "/images",
        StaticFiles(directory=settings.storage_root, check_dir=False),
        name="images",
    )

    return app


app = create_app()
