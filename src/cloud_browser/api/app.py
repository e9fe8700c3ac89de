"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from cloud_browser.api.live_view import router as live_view_router
from cloud_browser.api.sessions import cors_headers
from cloud_browser.api.sessions import router as sessions_router
from cloud_browser.app_logging import configure_logging
from cloud_browser.config import parse_csv
from cloud_browser.containers import AppContainer
from cloud_browser.domain.errors import SessionError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    settings = container.settings
    configure_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        logger.info("Shutting down, closing browser sessions")
        await app.state.container.close_resources()

    app = FastAPI(title="Cloud Browser API", lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_csv(settings.cors_allow_origins) or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SessionError)
    async def session_error_handler(
        request: Request, exc: SessionError
    ) -> JSONResponse:
        content: dict[str, object] = {"error": exc.message}
        if exc.details:
            content["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Invalid request body.",
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception("Unhandled error", extra={"path": request.url.path})
        content: dict[str, object] = {"error": str(exc) or "Internal server error"}
        if settings.environment == "local":
            content["details"] = type(exc).__name__
        # Runs outside CORSMiddleware, so the headers are added here.
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=content,
            headers=cors_headers(settings, request.headers.get("origin")),
        )

    app.include_router(sessions_router)
    app.include_router(live_view_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    if settings.static_dir:
        if Path(settings.static_dir).is_dir():
            static_files = StaticFiles(directory=settings.static_dir, html=True)
            app.mount("/", static_files, name="static")
        else:
            logger.warning("Static directory %s not found", settings.static_dir)

    return app
