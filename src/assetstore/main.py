"""Main application entrypoint for the asset store service."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from assetstore.api.v1 import routes_health
from assetstore.core.config import settings
from assetstore.core.logging import setup_logging
from assetstore.storage.base import AssetStore
from assetstore.storage.factory import get_asset_store

logger = logging.getLogger(__name__)


def create_app(store: AssetStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The asset store is initialized during startup, so a misconfigured
    backend stops the process before it serves traffic.

    Args:
        store: Asset store to use instead of the configured one

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        asset_store = store if store is not None else get_asset_store()
        app.state.asset_store = asset_store
        await asset_store.initialize()
        logger.info(
            "Asset store ready",
            extra={"backend": asset_store.backend_name},
        )
        yield

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
    )

    app.include_router(routes_health.router, tags=["health"])

    return app


# Export app instance for ASGI servers
app = create_app()
