"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Everything a request needs (settings, TokenManager, engine,
session factory) is built here once and stored on app.state; there are
no module-level singletons. Run with:

    uvicorn fintrack.main:create_app --factory

Building the TokenManager validates the token config, so bad secrets or
TTLs stop the process here, before the server accepts a connection.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from fintrack import __version__
from fintrack.api import api_router
from fintrack.api.responses import error_response
from fintrack.auth.tokens import TokenManager
from fintrack.config import Settings, get_settings
from fintrack.db.engine import build_engine, build_session_factory
from fintrack.db.models import Base
from fintrack.errors import AppError

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(
        "fintrack.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    async with app.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("fintrack.schema_ready")

    yield

    logger.info("fintrack.shutdown")
    await app.state.engine.dispose()


def _register_error_handlers(app: FastAPI) -> None:
    """Render every failure in the {"status_code", "error"} envelope."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(
                "request.failed", error=str(exc), error_type=type(exc).__name__
            )
        return error_response(exc.status_code, exc.public_message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return error_response(422, "invalid input")

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("request.unhandled_error", error_type=type(exc).__name__)
        return error_response(500, "internal server error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="fintrack",
        description="Personal finance tracker — accounts and transactions behind JWT auth",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.token_manager = TokenManager(settings.token_config())
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler

    from fintrack.middleware.request_id import RequestIdMiddleware
    from fintrack.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Token-Expired", "X-Request-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    _register_error_handlers(app)
    app.include_router(api_router)

    return app
