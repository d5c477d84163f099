"""Exceptions raised by asset store backends."""


class AssetStoreError(Exception):
    """Base exception for asset store operations."""

    def __init__(self, message: str, object_name: str | None = None):
        self.object_name = object_name
        super().__init__(message)


class AssetNotFoundError(AssetStoreError):
    """Exception raised when the requested asset does not exist."""
    pass


class AssetAlreadyExistsError(AssetStoreError):
    """Exception raised when a conditional write finds the target occupied."""
    pass


class ConfigurationError(AssetStoreError):
    """Exception raised when the store is misconfigured, unreachable or not initialized."""
    pass


class StoreTransportError(AssetStoreError):
    """Exception raised for backend failures that cannot be classified."""
    pass
