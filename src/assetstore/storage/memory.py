"""In-memory asset store for tests and local development."""

import logging
from typing import BinaryIO, Dict

from assetstore.storage.base import InitializationGuard, operation_scope
from assetstore.storage.naming import AssetKey, describe_key, resolve_object_name
from assetstore.storage.results import StoreResult

logger = logging.getLogger(__name__)


class MemoryAssetStore:
    """Asset store holding objects in a dictionary.

    Each operation runs without awaiting between its existence check and
    its write, which makes conditional writes atomic on the event loop.
    """

    backend_name = "memory"

    def __init__(self):
        self._guard: InitializationGuard[Dict[str, bytes]] = InitializationGuard("memory store")

    @property
    def initialized(self) -> bool:
        return self._guard.initialized

    async def initialize(self) -> None:
        await self._guard.initialize(self._connect)

    async def _connect(self) -> Dict[str, bytes]:
        return {}

    def public_url(self, key: AssetKey | str) -> str | None:
        self._guard.require()
        return None

    async def upload(
        self, key: AssetKey | str, data: BinaryIO, overwrite: bool = False
    ) -> StoreResult:
        objects = self._guard.connection
        name = resolve_object_name(key)

        with operation_scope(name):
            content = data.read()
            if not overwrite and name in objects:
                logger.info("Asset already exists in memory", extra={"object_name": name})
                return StoreResult.exists(name)

            objects[name] = content

        return StoreResult.success(name)

    async def download(self, key: AssetKey | str, destination: BinaryIO) -> StoreResult:
        objects = self._guard.connection
        name = resolve_object_name(key)

        with operation_scope(name):
            content = objects.get(name)
            if content is None:
                return StoreResult.missing(name, describe_key(key))

            destination.write(content)

        return StoreResult.success(name)

    async def copy(self, source_name: str, destination: AssetKey) -> StoreResult:
        objects = self._guard.connection
        source = resolve_object_name(source_name)
        name = resolve_object_name(destination)

        with operation_scope(name):
            if source not in objects:
                return StoreResult.missing(source)
            if name in objects:
                return StoreResult.exists(name)

            objects[name] = objects[source]

        return StoreResult.success(name)

    async def delete(self, key: AssetKey | str) -> StoreResult:
        objects = self._guard.connection
        name = resolve_object_name(key)

        with operation_scope(name):
            objects.pop(name, None)

        return StoreResult.success(name)
