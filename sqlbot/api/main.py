"""
FastAPI Application

Main FastAPI application for SQLBot with:
- Lifespan management for connector, catalog, LLM and Telegram gateway
- CORS middleware
- Global exception handlers for connector and catalog errors
- Telegram webhook, indexer and health endpoints

Usage:
    uvicorn sqlbot.api.main:app --port 8000
"""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sqlbot import __version__
from sqlbot.api.routes import health, indexer, webhook
from sqlbot.catalog.store import CatalogStoreError
from sqlbot.config import get_settings
from sqlbot.connectors.base import ConnectionError as ConnectorConnectionError
from sqlbot.connectors.base import QueryError, SchemaError
from sqlbot.container import build_services
from sqlbot.messaging.base import BaseMessageGateway
from sqlbot.pipeline.indexer import CatalogIndexer
from sqlbot.pipeline.question import QuestionPipeline

logger = logging.getLogger(__name__)

# Global state for pipelines and components
app_state: dict[str, Any] = {
    "services": None,
    "pipeline": None,
    "indexer": None,
    "connector": None,
    "catalog": None,
    "messenger": None,
    "webhook_secret": None,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Lifespan context manager for startup and shutdown.

    Initializes:
    - Database connector (PostgreSQL)
    - Catalog store
    - LLM provider and Telegram gateway
    - Question pipeline and catalog indexer
    """
    config = get_settings()
    logger.info(f"Starting {config.app_name} API server...")
    app_state["webhook_secret"] = config.telegram.webhook_secret

    try:
        try:
            services = await build_services(config)
        except (ValueError, ConnectorConnectionError) as e:
            logger.warning(f"Bot services not initialized: {e}")
        else:
            app_state.update(
                services=services,
                pipeline=services.pipeline,
                indexer=services.indexer,
                connector=services.connector,
                catalog=services.catalog,
                messenger=services.messenger,
            )

        logger.info(f"{config.app_name} API server started")

        yield  # Application runs here

    finally:
        logger.info(f"Shutting down {config.app_name} API server...")
        if app_state["services"] is not None:
            try:
                await app_state["services"].close()
            except Exception as e:
                logger.error(f"Error closing services: {e}")
        for key in app_state:
            app_state[key] = None


# Create FastAPI app
app = FastAPI(
    title="SQLBot API",
    description="Telegram bot that answers questions with read-only SQL",
    version=__version__,
    lifespan=lifespan,
)

cors_origins_env = os.getenv("CORS_ORIGINS", "")
cors_origins = (
    [origin.strip() for origin in cors_origins_env.split(",") if origin.strip()]
    if cors_origins_env
    else ["*"]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_methods=["POST", "GET"],
    allow_headers=["Content-Type", "X-Telegram-Bot-Api-Secret-Token"],
)


# Exception handlers
@app.exception_handler(ConnectorConnectionError)
async def connection_error_handler(request: Request, exc: ConnectorConnectionError) -> JSONResponse:
    """Handle database connection errors."""
    logger.error(f"Database connection error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": "connection_error",
            "message": "Database connection failed. Please try again later.",
        },
    )


@app.exception_handler(QueryError)
async def query_error_handler(request: Request, exc: QueryError) -> JSONResponse:
    """Handle query execution errors."""
    logger.error(f"Query execution error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "query_error",
            "message": "Failed to execute query. Please check your request.",
        },
    )


@app.exception_handler(SchemaError)
async def schema_error_handler(request: Request, exc: SchemaError) -> JSONResponse:
    """Handle schema introspection errors."""
    logger.error(f"Schema introspection error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "schema_error", "message": str(exc)},
    )


@app.exception_handler(CatalogStoreError)
async def catalog_error_handler(request: Request, exc: CatalogStoreError) -> JSONResponse:
    """Handle catalog persistence errors."""
    logger.error(f"Catalog error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "catalog_error", "message": str(exc)},
    )


# Include routers
app.include_router(webhook.router, tags=["telegram"])
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(indexer.router, prefix="/api/v1", tags=["indexer"])


# Root endpoint
@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "name": "SQLBot API",
        "version": __version__,
        "description": "Natural language to read-only SQL over Telegram",
        "docs": "/docs",
    }


def get_pipeline() -> QuestionPipeline:
    """Get the initialized question pipeline."""
    if app_state["pipeline"] is None:
        raise RuntimeError("Pipeline not initialized")
    return app_state["pipeline"]


def get_indexer() -> CatalogIndexer:
    """Get the initialized catalog indexer."""
    if app_state["indexer"] is None:
        raise RuntimeError("Indexer not initialized")
    return app_state["indexer"]


def get_messenger() -> BaseMessageGateway | None:
    """Get the Telegram gateway, if configured."""
    return app_state["messenger"]
