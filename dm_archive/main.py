"""
FastAPI application factory and configuration.
"""
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from dm_archive.core.config import get_settings
from dm_archive.core.database import init_db
from dm_archive.core.errors import ArchiveError, MethodNotAllowedError
from dm_archive.core.logging import setup_logging, get_logger
from dm_archive.api import archive, health


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger = get_logger(__name__)
    logger.info("Starting application...")
    
    init_db()
    logger.info("Archive store initialized")
    
    yield
    
    logger.info("Shutting down application...")


async def archive_error_handler(request: Request, exc: ArchiveError) -> Response:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def method_not_allowed_handler(request: Request, exc: MethodNotAllowedError) -> Response:
    return Response(status_code=exc.status_code)


async def routing_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """
    Every path matches the archive's GET, PUT and OPTIONS routes, so any
    other method ends here as a router 405 and gets an empty body.
    """
    if exc.status_code == MethodNotAllowedError.status_code:
        return await method_not_allowed_handler(request, MethodNotAllowedError())
    return await http_exception_handler(request, exc)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    
    setup_logging()
    logger = get_logger(__name__)
    
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Archive of encrypted nostr direct messages, indexed by sender and receiver",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    
    app.add_exception_handler(StarletteHTTPException, routing_error_handler)
    app.add_exception_handler(ArchiveError, archive_error_handler)
    
    # Health first: the archive router ends in catch-all routes
    app.include_router(health.router)
    app.include_router(archive.router)
    
    logger.info(
        "Application created",
        extra={
            "extra_data": {
                "app_name": settings.app_name,
                "version": settings.app_version,
                "debug": settings.debug,
            }
        }
    )
    
    return app


# Create the application instance
app = create_app()


def run() -> None:
    """Console entry point."""
    settings = get_settings()
    uvicorn.run("dm_archive.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
