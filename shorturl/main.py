"""Main application module.

This module builds the FastAPI application: routes, middleware, exception
handlers, and the startup/shutdown of the store client and scheduler.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException

from shorturl.api import api_router
from shorturl.core.config import settings
from shorturl.core.logging import setup_logging
from shorturl.db.base import Database
from shorturl.middleware.logging import RequestLoggingMiddleware
from shorturl.scheduler import SchedulerService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the store and start the scheduler; undo both on shutdown."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")

    database: Database = app.state.database
    await database.connect()

    if settings.EXPIRY_CLEANUP_ENABLED:
        logger.info("Starting expired URL cleanup scheduler")
        app.state.scheduler = SchedulerService(database)
        app.state.scheduler.start()
    else:
        logger.info("Expired URL cleanup is disabled")

    try:
        yield
    finally:
        logger.info(f"Shutting down {settings.APP_NAME}")
        scheduler: Optional[SchedulerService] = app.state.scheduler
        if scheduler is not None:
            scheduler.shutdown()
            app.state.scheduler = None
        await database.dispose()


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        database: Store client to serve from. A new one built from settings
            is used when omitted. It is connected on startup and disposed
            on shutdown.

    Returns:
        FastAPI: The configured application
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.database = database or Database()
    app.state.scheduler = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if settings.REQUEST_LOGGING_ENABLED:
        app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Missing or malformed input is the caller's fault: 400, not 500."""
        logger.info(f"Request validation error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Log anything unhandled with an error id and return a generic 500."""
        error_id = f"error-{time.time()}"
        logger.bind(error_id=error_id).opt(exception=exc).error(
            f"Unhandled exception in {request.method} {request.url.path}"
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "errorId": error_id}
        )

    return app


app = create_app()
