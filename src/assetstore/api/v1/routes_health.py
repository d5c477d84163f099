"""Health check endpoint for the asset store service."""

from fastapi import APIRouter, Request

from assetstore.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Health check endpoint.

    Reports service identity and whether the asset store finished its
    startup connectivity check. No backend call is made here.

    Returns:
        dict: Health status with status, service, version and storage fields
    """
    store = getattr(request.app.state, "asset_store", None)
    initialized = bool(store is not None and store.initialized)

    return {
        "status": "ok" if initialized else "starting",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "storage": {
            "backend": store.backend_name if store is not None else None,
            "initialized": initialized,
        },
    }
