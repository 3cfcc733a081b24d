"""FastAPI application entry point.

This module creates and configures the FastAPI application, including:
- Exception handlers for API errors
- API v1 router mounting (admin events and wizard sessions)
- Telegram transport startup (polling or webhook) in the lifespan
- Health check endpoint
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fanjobo.api import telegram_webhook
from fanjobo.api.v1.router import router as v1_router
from fanjobo.bot.dispatcher import BotDispatcher
from fanjobo.bot.menu import MenuDispatcher
from fanjobo.bot.telegram import TelegramTransport
from fanjobo.core.config import settings
from fanjobo.core.database import async_session_factory, engine
from fanjobo.core.errors import APIError
from fanjobo.core.responses import ErrorDetail, ErrorResponse
from fanjobo.repositories.content_repository import ContentRepository
from fanjobo.repositories.storage import SqlStorage
from fanjobo.services.drive_storage import GoogleDriveStorage
from fanjobo.services.notifications import AdminNotificationSink
from fanjobo.wizards.catalog import build_default_catalog
from fanjobo.wizards.context import ActorContextLoader
from fanjobo.wizards.controller import WizardController
from fanjobo.wizards.external import ExternalStepAdapter
from fanjobo.wizards.session_store import get_session_store

logger = structlog.get_logger()


def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors.

    Args:
        request: The incoming request.
        exc: The APIError that was raised.

    Returns:
        JSONResponse with error envelope and appropriate status code.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
            )
        ).model_dump(),
    )


def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors from FastAPI.

    Args:
        request: The incoming request.
        exc: The RequestValidationError from Pydantic.

    Returns:
        JSONResponse with VALIDATION_ERROR code and field-level details.
    """
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=ErrorDetail(
                code="VALIDATION_ERROR",
                message="Request validation failed",
                details=[
                    {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]}
                    for e in exc.errors()
                ],
            )
        ).model_dump(),
    )


def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions.

    Returns 500 INTERNAL_ERROR without exposing stack traces.

    Args:
        request: The incoming request.
        exc: The unhandled exception.

    Returns:
        JSONResponse with generic error message (500).
    """
    logger.exception("Unhandled exception", exc_info=exc, path=str(request.url.path))

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
            )
        ).model_dump(),
    )


def build_dispatcher(
    telegram: TelegramTransport | None = None,
    file_storage: GoogleDriveStorage | None = None,
) -> BotDispatcher:
    """Wire the wizard engine to its production collaborators.

    Args:
        telegram: Transport whose bot downloads documents, if enabled.
        file_storage: Drive store for uploads; built from settings when None.

    Returns:
        BotDispatcher over a WizardController and the plain menu.
    """
    storage = SqlStorage(async_session_factory)
    context_loader = ActorContextLoader(storage)
    external = ExternalStepAdapter(
        file_storage or GoogleDriveStorage.from_settings(settings),
        telegram.fetcher if telegram is not None else None,
        timeout_seconds=settings.wizard_upload_timeout_seconds,
        max_size_bytes=settings.wizard_upload_max_size_mb * 1024 * 1024,
    )
    controller = WizardController(
        build_default_catalog(),
        get_session_store(),
        storage=storage,
        notifier=AdminNotificationSink(storage),
        external=external,
        context_loader=context_loader,
    )
    return BotDispatcher(
        controller,
        MenuDispatcher(context_loader, ContentRepository(async_session_factory)),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the dispatcher and run the Telegram transport, if configured."""
    telegram = TelegramTransport(settings) if settings.telegram_enabled else None
    file_storage = GoogleDriveStorage.from_settings(settings)
    dispatcher = build_dispatcher(telegram, file_storage)
    app.state.dispatcher = dispatcher
    app.state.telegram = telegram if settings.telegram_use_webhook else None

    if telegram is not None:
        telegram.attach(dispatcher)
        await telegram.start()
    else:
        logger.info("TELEGRAM_BOT_TOKEN not set; Telegram transport disabled")

    try:
        yield
    finally:
        if telegram is not None:
            await telegram.stop()
        await file_storage.drain()
        await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Fanjobo Bot API",
        version="1.0.0",
        description="Student services chat bot: guided wizards and admin API",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "X-Admin-Key"],
    )

    # Order matters: specific handlers first, then catch-all
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    app.include_router(v1_router, prefix="/api/v1")
    if settings.telegram_use_webhook:
        app.include_router(telegram_webhook.router, prefix=settings.webhook_path)

    # Health check endpoint (outside versioned API)
    @app.get("/health")
    def health_check() -> dict:
        """Health check endpoint for monitoring.

        Returns:
            {"status": "healthy"} if service is running.
        """
        return {"status": "healthy"}

    return app


# Used by uvicorn: uvicorn fanjobo.main:app
app = create_app()
