"""Storage backend selection."""

import logging

from assetstore.core.config import Settings, settings
from assetstore.storage.base import AssetStore
from assetstore.storage.exceptions import ConfigurationError
from assetstore.storage.folder import FolderAssetStore
from assetstore.storage.gcs import GCSAssetStore
from assetstore.storage.memory import MemoryAssetStore

logger = logging.getLogger(__name__)

_store: AssetStore | None = None


def create_asset_store(config: Settings) -> AssetStore:
    """Create the asset store selected by ``STORAGE_BACKEND``.

    Raises:
        ConfigurationError: If the backend name is unknown or its settings
            are incomplete
    """
    backend = config.STORAGE_BACKEND.strip().lower()

    if backend == "gcs":
        store: AssetStore = GCSAssetStore(
            bucket_name=config.GCS_BUCKET_NAME,
            project_id=config.gcp_project,
            public_url_base=config.public_url_base,
        )
    elif backend == "folder":
        store = FolderAssetStore(config.ASSETS_FOLDER_PATH)
    elif backend == "memory":
        store = MemoryAssetStore()
    else:
        raise ConfigurationError(f"Unknown storage backend: {config.STORAGE_BACKEND!r}")

    logger.info(f"Using asset store backend: {store.backend_name}")
    return store


def get_asset_store() -> AssetStore:
    """Return the process-wide asset store, creating it on first use."""
    global _store
    if _store is None:
        _store = create_asset_store(settings)
    return _store


def reset_asset_store() -> None:
    """Forget the process-wide asset store."""
    global _store
    _store = None
