"""
WordBank Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Served by uvicorn (uvicorn wordbank.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────────────────┐  │
    │  │  Req ID  │→│  Logging    │→│  CORS            │  │
    │  └──────────┘ └─────────────┘ └──────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────┐ ┌──────────────────┐ ┌─────┐  │
    │  │ POST create-word │ │ POST update-word │ │/hlth│  │
    │  └──────────────────┘ └──────────────────┘ └─────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ WordBankError → kind + status │ other → 500   │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, report missing GitHub configuration
    Shutdown: close the GitHub HTTP client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wordbank import __version__
from wordbank.config import settings
from wordbank.exceptions import (
    ConfigMissingError,
    DocumentConflictError,
    MissingFieldError,
    NotFoundError,
    ValidationError,
    WordBankError,
)
from wordbank.middleware.logging import RequestLoggingMiddleware
from wordbank.middleware.request_id import RequestIDMiddleware, request_id_var
from wordbank.routes import health, words
from wordbank.services.word_service import word_service

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # One line per GitHub call is already logged by the store
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("WordBank Backend %s starting up...", __version__)

    try:
        settings.validate_remote()
        logger.info(
            "Committing to %s/%s (document=%s, images=%s/)",
            settings.repo_owner,
            settings.repo_name,
            settings.document_path,
            settings.image_dir,
        )
    except ConfigMissingError as e:
        # Keep serving: /health reports the problem, writes answer config_missing
        logger.error("Configuration error: %s", e.message)

    yield

    logger.info("WordBank Backend shutting down...")
    await word_service.aclose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(exc: WordBankError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.kind,
            "message": exc.message,
            "details": exc.context or None,
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to JSON error responses.

    Handler hierarchy:
        MissingFieldError / ValidationError → 400 (client can fix the form)
        NotFoundError                       → 404
        DocumentConflictError               → 409 (client resubmits)
        WordBankError (base)                → exc.status_code (500 / 502)
        Exception (fallback)                → 500, no internals in the body
    """

    @app.exception_handler(MissingFieldError)
    @app.exception_handler(ValidationError)
    async def handle_client_error(request: Request, exc: WordBankError):
        logger.warning("[%s] Rejected form: %s", request_id_var.get(""), exc.message)
        return _error_response(exc)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(exc)

    @app.exception_handler(DocumentConflictError)
    async def handle_conflict(request: Request, exc: DocumentConflictError):
        logger.warning(
            "[%s] Document conflict, client must resubmit: %s",
            request_id_var.get(""),
            exc.context,
        )
        return _error_response(exc)

    @app.exception_handler(WordBankError)
    async def handle_wordbank_error(request: Request, exc: WordBankError):
        logger.error(
            "[%s] %s: %s | Context: %s",
            request_id_var.get(""),
            exc.kind,
            exc.message,
            exc.context,
        )
        return _error_response(exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "Internal server error",
                "details": None,
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="WordBank API",
        description=(
            "Accepts word submissions (category, key, name, description and an "
            "image) and commits them to a GitHub repository: the image under "
            "imgs/ and the entry in the answers JSON document."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(words.router)
    app.include_router(health.router)

    return app


app = create_app()
