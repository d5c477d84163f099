"""Versioned asset storage.

Stores, copies, downloads and deletes asset blobs on pluggable backends
(Google Cloud Storage, local or network folders, memory) behind one
interface with uniform conditional-write and error semantics.
"""

from assetstore.storage.base import AssetStore, InitializationGuard
from assetstore.storage.exceptions import (
    AssetAlreadyExistsError,
    AssetNotFoundError,
    AssetStoreError,
    ConfigurationError,
    StoreTransportError,
)
from assetstore.storage.factory import create_asset_store, get_asset_store
from assetstore.storage.naming import AssetKey, object_name
from assetstore.storage.results import ErrorKind, StoreOutcome, StoreResult

__all__ = [
    "AssetStore",
    "InitializationGuard",
    "AssetStoreError",
    "AssetNotFoundError",
    "AssetAlreadyExistsError",
    "ConfigurationError",
    "StoreTransportError",
    "create_asset_store",
    "get_asset_store",
    "AssetKey",
    "object_name",
    "ErrorKind",
    "StoreOutcome",
    "StoreResult",
]
