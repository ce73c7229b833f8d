"""
FastAPI application entry point.

create_app() builds the settings, the S3 client and the services once and
keeps them on app.state; routes reach them through dependencies.
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException

from relay.api.router import api_router
from relay.config import Settings
from relay.middleware.metrics_middleware import MetricsMiddleware
from relay.services.access_urls import AccessUrlService
from relay.services.share_service import ShareService
from relay.services.upload_service import UploadService
from relay.storage.s3_client import S3Client
from relay.utils.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    - Startup: Configure structured JSON logging
    """
    settings: Settings = app.state.settings
    configure_logging('file-relay', settings.log_level)

    mode = "permanent" if settings.use_permanent_urls else "signed"
    logger.info(
        f"Server running on port {settings.port} "
        f"(bucket={settings.s3_bucket_name}, urls={mode})"
    )

    yield


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error as {"error": <detail>}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def create_app(settings: Optional[Settings] = None, storage: Optional[S3Client] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration, read from the environment when omitted
        storage: S3 client, built from settings when omitted

    Returns:
        Configured FastAPI app
    """
    if settings is None:
        settings = Settings()
    if storage is None:
        storage = S3Client(settings)

    access_urls = AccessUrlService(storage, settings)

    app = FastAPI(
        title="File Relay",
        description="Upload files to S3 and share them by URL",
        version="0.1.0",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.storage = storage
    app.state.upload_service = UploadService(storage, settings, access_urls)
    app.state.share_service = ShareService(storage, settings, access_urls)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Metrics middleware (must be after CORS to track all requests)
    app.add_middleware(MetricsMiddleware)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(api_router)
    app.add_api_route("/metrics", metrics, methods=["GET"], include_in_schema=False)

    # Static assets last so the API routes win
    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    else:
        logger.warning(f"Static directory not found, not serving assets: {settings.static_dir}")

    return app


def run():
    """Console entry point: serve the app with uvicorn."""
    settings = Settings()
    uvicorn.run(
        "relay.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port
    )
