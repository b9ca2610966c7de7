#!/usr/bin/env python3
"""
FastAPI Application Entry Point

Builds the protocol server: session lifecycle, text completions (ND-JSON, SSE
or single JSON), the initialize handshake, OAuth discovery stubs and a
health probe.

All long-lived objects (settings, SessionStore, CompletionService) are
created by ``create_app`` and hung on ``app.state``; route handlers receive
them through the dependencies in ``api/dependencies.py``.
"""

import uuid
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from protocol_server.application.api.error_responder import ErrorResponder
from protocol_server.application.api.middleware import (
    add_error_handling_middleware,
    add_request_logging_middleware,
)
from protocol_server.application.api.routes import (
    completions_router,
    health_router,
    initialize_router,
    oauth_router,
    session_router,
)
from protocol_server.application.services.completion_service import CompletionService
from protocol_server.core.config.constants import HEADER_REQUEST_ID, ErrorCode
from protocol_server.core.config.settings import Settings, get_settings
from protocol_server.core.exceptions import ProtocolError
from protocol_server.core.logging.logger import (
    clear_request_id,
    get_logger,
    set_request_id,
    setup_logging,
)
from protocol_server.session.store import SessionStore

logger = get_logger(__name__)


# ============================================================================
# Application Lifespan
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle (startup and shutdown).
    """
    settings: Settings = app.state.settings

    setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

    logger.info(
        "Starting protocol server",
        environment=settings.app.ENVIRONMENT,
        version=settings.app.APP_VERSION,
        session_ttl_seconds=settings.session.SESSION_TTL_SECONDS,
    )

    try:
        yield
    finally:
        logger.info(
            "Application shutdown complete",
            open_sessions=app.state.session_store.active_count(),
        )


# ============================================================================
# Middleware
# ============================================================================


async def request_id_middleware(request: Request, call_next):
    """
    Bind a request id for log correlation and echo it in the response.
    """
    request_id = request.headers.get(HEADER_REQUEST_ID) or str(uuid.uuid4())

    set_request_id(request_id)

    try:
        response = await call_next(request)
        response.headers[HEADER_REQUEST_ID] = request_id
        return response

    finally:
        clear_request_id()


# ============================================================================
# Exception Handlers
# ============================================================================


async def protocol_exception_handler(request: Request, exc: ProtocolError):
    """Handle invalid_request / invalid_session failures."""
    exc.with_context(path=request.url.path)
    logger.warning(f"Protocol error: {exc.message}", **exc.to_dict())
    return ErrorResponder.from_exception(exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Parameter validation failures share the invalid_request envelope."""
    logger.warning("Request validation failed", path=request.url.path, errors=len(exc.errors()))
    return ErrorResponder.respond(None, ErrorCode.INVALID_REQUEST, "Invalid request parameters")


# ============================================================================
# Application Factory
# ============================================================================


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit configuration; defaults to the global settings

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="Session-oriented text completion server with ND-JSON and SSE streaming",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.session_store = SessionStore(
        ttl=timedelta(seconds=settings.session.SESSION_TTL_SECONDS),
        lock_stripes=settings.session.SESSION_LOCK_STRIPES,
    )
    app.state.completion_service = CompletionService(settings)

    # ========================================================================
    # MIDDLEWARE REGISTRATION
    # ========================================================================
    # Last added runs first. Execution order:
    # request id → request logging → CORS → error handling → routes

    add_error_handling_middleware(app, include_traceback=settings.app.INCLUDE_TRACEBACK)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[HEADER_REQUEST_ID],
    )

    add_request_logging_middleware(app)

    app.middleware("http")(request_id_middleware)

    # ========================================================================
    # EXCEPTION HANDLERS
    # ========================================================================

    app.add_exception_handler(ProtocolError, protocol_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # ========================================================================
    # ROUTER REGISTRATION
    # ========================================================================

    app.include_router(session_router)
    app.include_router(completions_router)
    app.include_router(initialize_router)
    app.include_router(oauth_router)
    app.include_router(health_router)

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint with API information.
        """
        return {
            "name": settings.app.APP_NAME,
            "version": settings.app.APP_VERSION,
            "environment": settings.app.ENVIRONMENT,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# Create application instance
app = create_app()


# ============================================================================
# Main Entry Point
# ============================================================================


def main():
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "protocol_server.application.app:app",
        host=settings.app.API_HOST,
        port=settings.app.API_PORT,
        reload=settings.app.ENVIRONMENT == "development" and settings.app.DEBUG,
        log_level=settings.logging.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
