"""Local folder asset store.

Works on local disks and on mounted network shares that support hard
links. Every write lands in a staging file first and is then published
with ``os.link`` (create only) or ``os.replace`` (overwrite), so readers
never observe a partially written object.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import BinaryIO
from uuid import uuid4

from assetstore.storage.base import InitializationGuard, operation_scope
from assetstore.storage.exceptions import ConfigurationError, StoreTransportError
from assetstore.storage.naming import AssetKey, describe_key, resolve_object_name
from assetstore.storage.results import ErrorKind, StoreResult

logger = logging.getLogger(__name__)

CHUNK_SIZE = 65536  # 64KB chunks
STAGING_DIR = ".staging"


class BlockedPathError(OSError):
    """A file occupies a directory component of the target path."""


def classify_error(exc: BaseException) -> ErrorKind:
    """Map a filesystem error to an error kind."""
    if isinstance(exc, (FileNotFoundError, NotADirectoryError)):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, FileExistsError):
        return ErrorKind.ALREADY_EXISTS
    if isinstance(exc, PermissionError):
        return ErrorKind.CONFIGURATION
    return ErrorKind.TRANSPORT


class FolderAssetStore:
    """Asset store keeping each object as a file below a base directory."""

    backend_name = "folder"

    def __init__(self, base_path: str | Path):
        if not str(base_path):
            raise ConfigurationError("ASSETS_FOLDER_PATH not configured")

        self.base_path = Path(base_path)
        self._guard: InitializationGuard[Path] = InitializationGuard(
            f"assets folder '{self.base_path}'"
        )

    @property
    def initialized(self) -> bool:
        return self._guard.initialized

    async def initialize(self) -> None:
        """Create the folder and verify it is writable and supports hard links.

        Raises:
            ConfigurationError: If the folder cannot be used
        """
        await self._guard.initialize(lambda: asyncio.to_thread(self._connect))

    def _connect(self) -> Path:
        root = self.base_path.resolve()
        staging = root / STAGING_DIR
        staging.mkdir(parents=True, exist_ok=True)

        if not os.access(root, os.W_OK):
            raise ConfigurationError(f"Assets folder is not writable: {root}")

        probe = staging / f"probe-{uuid4().hex}"
        probe_link = staging / f"probe-{uuid4().hex}.link"
        probe.write_bytes(b"")
        try:
            os.link(probe, probe_link)
        except OSError as e:
            raise ConfigurationError(f"Assets folder does not support hard links: {root}") from e
        finally:
            probe_link.unlink(missing_ok=True)
            probe.unlink(missing_ok=True)

        return root

    def public_url(self, key: AssetKey | str) -> str | None:
        self._guard.require()
        return None

    async def upload(
        self, key: AssetKey | str, data: BinaryIO, overwrite: bool = False
    ) -> StoreResult:
        root = self._guard.connection
        name = resolve_object_name(key)
        target = self._path_for(root, name)

        with operation_scope(name):
            try:
                await asyncio.to_thread(self._upload_file, root, data, target, overwrite)
            except Exception as e:
                if classify_error(e) is ErrorKind.ALREADY_EXISTS:
                    logger.info("Asset already exists in folder", extra={"object_name": name})
                    return StoreResult.exists(name)
                raise self._unexpected("upload", name, e) from e

        logger.info(
            "Asset written to folder",
            extra={"object_name": name, "path": str(target), "overwrite": overwrite},
        )
        return StoreResult.success(name)

    async def download(self, key: AssetKey | str, destination: BinaryIO) -> StoreResult:
        root = self._guard.connection
        name = resolve_object_name(key)
        path = self._path_for(root, name)

        with operation_scope(name):
            try:
                await asyncio.to_thread(self._download_file, path, destination)
            except Exception as e:
                if classify_error(e) is ErrorKind.NOT_FOUND:
                    logger.info("Asset not found in folder", extra={"object_name": name})
                    return StoreResult.missing(name, describe_key(key))
                raise self._unexpected("download", name, e) from e

        return StoreResult.success(name)

    async def copy(self, source_name: str, destination: AssetKey) -> StoreResult:
        root = self._guard.connection
        source = resolve_object_name(source_name)
        name = resolve_object_name(destination)
        source_path = self._path_for(root, source)
        target = self._path_for(root, name)

        with operation_scope(name):
            try:
                await asyncio.to_thread(self._copy_file, root, source_path, target)
            except Exception as e:
                kind = classify_error(e)
                if kind is ErrorKind.NOT_FOUND:
                    logger.info("Copy source not found in folder", extra={"source": source})
                    return StoreResult.missing(source)
                if kind is ErrorKind.ALREADY_EXISTS:
                    logger.info("Copy target already exists in folder", extra={"object_name": name})
                    return StoreResult.exists(name)
                raise self._unexpected("copy", name, e) from e

        logger.info("Asset copied in folder", extra={"source": source, "object_name": name})
        return StoreResult.success(name)

    async def delete(self, key: AssetKey | str) -> StoreResult:
        root = self._guard.connection
        name = resolve_object_name(key)
        path = self._path_for(root, name)

        with operation_scope(name):
            try:
                await asyncio.to_thread(path.unlink)
            except Exception as e:
                if classify_error(e) is ErrorKind.NOT_FOUND:
                    return StoreResult.success(name)
                raise self._unexpected("delete", name, e) from e

        logger.info("Asset deleted from folder", extra={"object_name": name})
        return StoreResult.success(name)

    @staticmethod
    def _path_for(root: Path, name: str) -> Path:
        """Resolve an object name below the root, rejecting traversal."""
        path = (root / name).resolve()
        if path == root or root not in path.parents:
            raise ValueError(f"Object name escapes the assets folder: {name!r}")
        if path.relative_to(root).parts[0] == STAGING_DIR:
            raise ValueError(f"Object name is reserved: {name!r}")
        return path

    @staticmethod
    def _stage(root: Path, data: BinaryIO) -> Path:
        staged = root / STAGING_DIR / f"{uuid4().hex}.tmp"
        try:
            with open(staged, "wb") as f:
                while chunk := data.read(CHUNK_SIZE):
                    f.write(chunk)
                f.flush()
                os.fsync(f.fileno())
        except BaseException:
            staged.unlink(missing_ok=True)
            raise
        return staged

    @staticmethod
    def _publish(staged: Path, target: Path, overwrite: bool) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except (FileExistsError, NotADirectoryError) as e:
            raise BlockedPathError(f"Parent of {target} is not a directory") from e
        if overwrite:
            os.replace(staged, target)
        else:
            # Raises FileExistsError if the target appeared in the meantime
            os.link(staged, target)

    def _upload_file(self, root: Path, data: BinaryIO, target: Path, overwrite: bool) -> None:
        staged = self._stage(root, data)
        try:
            self._publish(staged, target, overwrite)
        finally:
            staged.unlink(missing_ok=True)

    def _copy_file(self, root: Path, source: Path, target: Path) -> None:
        with open(source, "rb") as f:
            staged = self._stage(root, f)
        try:
            self._publish(staged, target, overwrite=False)
        finally:
            staged.unlink(missing_ok=True)

    @staticmethod
    def _download_file(path: Path, destination: BinaryIO) -> None:
        with open(path, "rb") as f:
            while chunk := f.read(CHUNK_SIZE):
                destination.write(chunk)

    def _unexpected(self, operation: str, name: str, error: Exception) -> Exception:
        logger.error(
            f"Failed to {operation} asset in folder",
            extra={"object_name": name, "error": str(error)},
        )
        if classify_error(error) is ErrorKind.CONFIGURATION:
            return ConfigurationError(f"Access denied: {self.base_path / name}", name)
        return StoreTransportError(f"Failed to {operation} {name}: {error}", name)
