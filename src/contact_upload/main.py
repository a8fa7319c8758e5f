"""
FastAPI application entry point.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from contact_upload import __version__
from contact_upload.config import Settings, get_settings
from contact_upload.contacts.csv_parser import CSVParser
from contact_upload.shared.correlation import CorrelationIdMiddleware
from contact_upload.shared.exceptions import AppError, NoFileUploadedError
from contact_upload.shared.logging import get_logger, setup_logging
from contact_upload.uploads.router import router as uploads_router
from contact_upload.uploads.store import UploadStore

logger = get_logger(__name__)

UPLOAD_FILE_LOC = ("body", "file")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)

    logger.info(
        "Application starting",
        extra={
            "env": settings.app_env,
            "upload_dir": str(app.state.upload_store.directory),
        },
    )
    logger.info(f"Server running on port {settings.port}", extra={"host": settings.host})

    yield

    logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The upload directory is created here, before any request is served.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Contact Upload API",
        description="Upload, validate and list contact CSV files",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    store = UploadStore(
        directory=settings.upload_dir,
        chunk_size=settings.upload_chunk_size,
    )
    store.ensure_directory()

    app.state.settings = settings
    app.state.upload_store = store
    app.state.csv_parser = CSVParser(
        delimiter=settings.csv_delimiter,
        encoding=settings.csv_encoding,
    )

    # Map domain exceptions to HTTP responses
    @app.exception_handler(AppError)
    async def _app_error(_: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    # A "file" field that is not a file part counts as no file at all
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = exc.errors()
        if any(tuple(error["loc"]) == UPLOAD_FILE_LOC for error in errors):
            logger.info("Upload rejected: file field is not a file part")
            no_file = NoFileUploadedError()
            return JSONResponse(status_code=no_file.status_code, content=no_file.to_content())

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "Request validation failed",
                "details": "; ".join(
                    f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
                    for error in errors
                ),
                "status": "failed",
            },
        )

    app.add_middleware(CorrelationIdMiddleware)

    # CORS middleware. The defaults allow every origin, which is not suitable for production.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=settings.cors_methods_list,
        allow_headers=settings.cors_headers_list,
    )

    app.include_router(uploads_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    return app


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    settings = get_settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
