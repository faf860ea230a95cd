"""
Notion → Discord relay FastAPI application.

Entry point for the webhook server.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from relay import config
from relay.repos.identity_cache import identity_cache
from relay.routes import webhook as webhook_routes

logger = logging.getLogger(__name__)


# Background task for cleanup
async def cleanup_task():
    """
    Background task to evict expired identity cache entries.

    Runs every IDENTITY_CACHE_CLEANUP_INTERVAL_SECONDS.
    """
    while True:
        try:
            evicted = identity_cache.cleanup_expired()
            if evicted > 0:
                logger.info("Evicted %d expired identity cache entries", evicted)
        except Exception:
            logger.exception("Error in identity cache cleanup task")

        await asyncio.sleep(config.settings.IDENTITY_CACHE_CLEANUP_INTERVAL_SECONDS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown logic:
    - Configure logging
    - Start background cache cleanup task
    - Stop it on shutdown
    """
    logging.basicConfig(
        level=config.settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    cleanup_task_handle = asyncio.create_task(cleanup_task())
    logger.info("Identity cache cleanup task started")

    yield

    cleanup_task_handle.cancel()
    try:
        await cleanup_task_handle
    except asyncio.CancelledError:
        logger.info("Identity cache cleanup task stopped")


app = FastAPI(
    title="Notion Discord Relay",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}


# Register routes (the channel route matches any single path segment)
app.include_router(webhook_routes.router)
