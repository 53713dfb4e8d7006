# src/bitslow_market/main.py
"""Main entry point for the BitSlow marketplace API."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from bitslow_market.api.error_handlers import register_error_handlers
from bitslow_market.api.v1 import auth_router, coins_router, transactions_router
from bitslow_market.core.logging import setup_logging
from bitslow_market.core.security import AUTH_HEADER
from bitslow_market.core.settings import settings
from bitslow_market.db.session import create_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and the schema on startup."""
    setup_logging(settings.log_level, settings.log_format)
    if settings.auto_create_tables:
        create_tables()
    logger.info("%s %s started", settings.app_name, settings.app_version)
    yield
    logger.info("%s shutting down", settings.app_name)


# Initialize FastAPI app
app = FastAPI(
    title="BitSlow Market API",
    description="Marketplace for uniquely identified BitSlow coins",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware; browsers must be able to read the token header.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
    expose_headers=[AUTH_HEADER],
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_error_handlers(app)

# Include API routers
app.include_router(auth_router, prefix="/api")
app.include_router(transactions_router, prefix="/api")
app.include_router(coins_router, prefix="/api")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Marketplace for uniquely identified BitSlow coins",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bitslow_market.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
