"""
StockDash Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stockdash.api import build_router
from stockdash.core.config import Settings, get_settings
from stockdash.core.logging import configure_logging
from stockdash.db.database import Database
from stockdash.services.base import ServiceError
from stockdash.services.indicators import InvalidParameter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings: Settings = app.state.settings

    # Startup
    configure_logging(settings.log_level)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    if not settings.groq_configured:
        logger.warning("Groq settings missing - /api/predict will return 500")

    database = Database(settings.database_url, echo=settings.debug)
    await database.init()
    app.state.database = database

    yield

    # Shutdown
    logger.info("Shutting down...")
    await database.close()


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "details": exc.details},
    )


async def invalid_parameter_handler(request: Request, exc: InvalidParameter) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": str(exc), "details": {}})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings (tests); defaults to environment settings

    Returns:
        Configured application; the database opens in the lifespan.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
        StockDash API

        ## Architecture
        - **Market Data**: Daily prices from Yahoo Finance, cached in the database
        - **Indicator Engine**: SMA and Wilder RSI (pure Python/NumPy)
        - **Prediction**: LLM next-day close guess (speculative)
        """,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(InvalidParameter, invalid_parameter_handler)

    # Include API routes
    app.include_router(build_router(include_debug=not settings.is_production), prefix="/api")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        }

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "StockDash Backend API",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
