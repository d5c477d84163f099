"""Asset store interface shared by all storage backends."""

import asyncio
import logging
from contextlib import contextmanager
from typing import Awaitable, BinaryIO, Callable, Generic, Iterator, Protocol, TypeVar, runtime_checkable

from assetstore.core.logging import object_name_context
from assetstore.storage.exceptions import ConfigurationError
from assetstore.storage.naming import AssetKey
from assetstore.storage.results import StoreResult

logger = logging.getLogger(__name__)

ConnectionT = TypeVar("ConnectionT")


@runtime_checkable
class AssetStore(Protocol):
    """Interface implemented by every storage backend.

    ``initialize`` must complete before any other operation. Expected
    outcomes (absent object, occupied target) are returned as
    ``StoreResult`` variants. Misconfiguration raises ``ConfigurationError``
    and unclassified backend failures raise ``StoreTransportError``.

    Cancelling an operation stops the caller from waiting, but the backend
    call already handed to a worker thread keeps running. A cancelled write
    is therefore either absent or complete, and it may complete after the
    cancellation. A caller that retries a cancelled create-only upload can
    see its own earlier write as ``ALREADY_EXISTS``.
    """

    backend_name: str

    @property
    def initialized(self) -> bool:
        """Whether ``initialize`` has completed successfully."""
        ...

    async def initialize(self) -> None:
        """Create the connection and probe the backend once."""
        ...

    async def upload(
        self, key: AssetKey | str, data: BinaryIO, overwrite: bool = False
    ) -> StoreResult:
        """Write ``data`` to the object for ``key``.

        Without ``overwrite`` the write only succeeds if no object exists
        yet, otherwise the result is ``ALREADY_EXISTS``.
        """
        ...

    async def download(self, key: AssetKey | str, destination: BinaryIO) -> StoreResult:
        """Stream the object for ``key`` into ``destination``."""
        ...

    async def copy(self, source_name: str, destination: AssetKey) -> StoreResult:
        """Copy a transient object to a versioned asset if the target is free."""
        ...

    async def delete(self, key: AssetKey | str) -> StoreResult:
        """Remove the object for ``key``. Missing objects count as deleted."""
        ...

    def public_url(self, key: AssetKey | str) -> str | None:
        """Directly fetchable URL, or None if the backend has none."""
        ...


class InitializationGuard(Generic[ConnectionT]):
    """One-shot barrier owning a backend connection.

    Concurrent ``initialize`` calls create a single connection. A failed
    attempt leaves the guard empty so that startup can be retried.
    """

    def __init__(self, target: str):
        self.target = target
        self._connection: ConnectionT | None = None
        self._lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> ConnectionT:
        return self.require()

    def require(self) -> ConnectionT:
        """Return the established connection.

        Raises:
            ConfigurationError: If ``initialize`` has not succeeded yet
        """
        if self._connection is None:
            raise ConfigurationError(f"No connection established yet to {self.target}.")
        return self._connection

    async def initialize(self, connect: Callable[[], Awaitable[ConnectionT]]) -> ConnectionT:
        """Run ``connect`` once and keep its connection.

        Raises:
            ConfigurationError: If ``connect`` fails for any reason
        """
        async with self._lock:
            if self._connection is not None:
                return self._connection

            try:
                connection = await connect()
            except ConfigurationError:
                logger.error("Asset store configuration invalid", extra={"target": self.target})
                raise
            except Exception as e:
                logger.error(
                    "Cannot connect to asset store",
                    extra={"target": self.target, "error": str(e)},
                )
                raise ConfigurationError(f"Cannot connect to {self.target}.") from e

            self._connection = connection
            logger.info("Asset store initialized", extra={"target": self.target})
            return connection


@contextmanager
def operation_scope(object_name: str) -> Iterator[None]:
    """Expose the object name of the running operation to log records."""
    token = object_name_context.set(object_name)
    try:
        yield
    finally:
        object_name_context.reset(token)
