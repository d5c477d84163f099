"""Google Cloud Storage asset store."""

import asyncio
import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import BinaryIO
from urllib.parse import quote

from google.api_core.exceptions import GoogleAPICallError
from google.cloud import storage

from assetstore.storage.base import InitializationGuard, operation_scope
from assetstore.storage.exceptions import ConfigurationError, StoreTransportError
from assetstore.storage.naming import AssetKey, describe_key, resolve_object_name
from assetstore.storage.results import ErrorKind, StoreResult

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/octet-stream"

# Generation 0 matches only when no live object exists
IF_NOT_EXISTS = 0

# Overrides the client library default retry; callers own retry policy
NO_RETRY = None


def classify_status(status: int | None) -> ErrorKind:
    """Map a GCS HTTP status code to an error kind."""
    if status == HTTPStatus.NOT_FOUND:
        return ErrorKind.NOT_FOUND
    if status == HTTPStatus.PRECONDITION_FAILED:
        return ErrorKind.ALREADY_EXISTS
    if status in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
        return ErrorKind.CONFIGURATION
    return ErrorKind.TRANSPORT


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception raised by the GCS client to an error kind."""
    if isinstance(exc, GoogleAPICallError):
        return classify_status(exc.code)
    return ErrorKind.TRANSPORT


@dataclass(frozen=True)
class GCSConnection:
    """Client and bucket handle shared by all operations."""

    client: storage.Client
    bucket: storage.Bucket


class GCSAssetStore:
    """Asset store backed by a single GCS bucket.

    Conditional writes use ``ifGenerationMatch=0`` so GCS itself decides
    which of several concurrent writers wins.
    """

    backend_name = "gcs"

    def __init__(
        self,
        bucket_name: str,
        project_id: str | None = None,
        public_url_base: str | None = None,
    ):
        if not bucket_name:
            raise ConfigurationError("GCS_BUCKET_NAME not configured")

        self.bucket_name = bucket_name
        self.project_id = project_id
        self.public_url_base = public_url_base.rstrip("/") if public_url_base else None
        self._guard: InitializationGuard[GCSConnection] = InitializationGuard(
            f"google cloud bucket '{bucket_name}'"
        )

    @property
    def initialized(self) -> bool:
        return self._guard.initialized

    async def initialize(self) -> None:
        """Create the client and verify the bucket is reachable.

        Raises:
            ConfigurationError: If credentials are missing or the bucket
                cannot be fetched
        """
        await self._guard.initialize(lambda: asyncio.to_thread(self._connect))

    def _connect(self) -> GCSConnection:
        client = storage.Client(project=self.project_id)
        bucket = client.get_bucket(self.bucket_name, retry=NO_RETRY)
        return GCSConnection(client=client, bucket=bucket)

    def public_url(self, key: AssetKey | str) -> str | None:
        bucket = self._guard.connection.bucket
        if self.public_url_base is None:
            return None
        name = resolve_object_name(key)
        return f"{self.public_url_base}/{bucket.name}/{quote(name)}"

    async def upload(
        self, key: AssetKey | str, data: BinaryIO, overwrite: bool = False
    ) -> StoreResult:
        bucket = self._guard.connection.bucket
        name = resolve_object_name(key)

        with operation_scope(name):
            blob = bucket.blob(name)
            try:
                await asyncio.to_thread(
                    blob.upload_from_file,
                    data,
                    content_type=CONTENT_TYPE,
                    if_generation_match=None if overwrite else IF_NOT_EXISTS,
                    retry=NO_RETRY,
                )
            except Exception as e:
                if classify_error(e) is ErrorKind.ALREADY_EXISTS:
                    logger.info(
                        "Asset already exists in GCS",
                        extra={"bucket": self.bucket_name, "object_name": name},
                    )
                    return StoreResult.exists(name)
                raise self._unexpected("upload", name, e) from e

        logger.info(
            "Asset uploaded to GCS",
            extra={"bucket": self.bucket_name, "object_name": name, "overwrite": overwrite},
        )
        return StoreResult.success(name)

    async def download(self, key: AssetKey | str, destination: BinaryIO) -> StoreResult:
        bucket = self._guard.connection.bucket
        name = resolve_object_name(key)

        with operation_scope(name):
            blob = bucket.blob(name)
            try:
                await asyncio.to_thread(blob.download_to_file, destination, retry=NO_RETRY)
            except Exception as e:
                if classify_error(e) is ErrorKind.NOT_FOUND:
                    logger.info(
                        "Asset not found in GCS",
                        extra={"bucket": self.bucket_name, "object_name": name},
                    )
                    return StoreResult.missing(name, describe_key(key))
                raise self._unexpected("download", name, e) from e

        return StoreResult.success(name)

    async def copy(self, source_name: str, destination: AssetKey) -> StoreResult:
        bucket = self._guard.connection.bucket
        source = resolve_object_name(source_name)
        name = resolve_object_name(destination)

        with operation_scope(name):
            try:
                await asyncio.to_thread(
                    bucket.copy_blob,
                    bucket.blob(source),
                    bucket,
                    new_name=name,
                    if_generation_match=IF_NOT_EXISTS,
                    retry=NO_RETRY,
                )
            except Exception as e:
                kind = classify_error(e)
                if kind is ErrorKind.NOT_FOUND:
                    logger.info(
                        "Copy source not found in GCS",
                        extra={"bucket": self.bucket_name, "source": source},
                    )
                    return StoreResult.missing(source)
                if kind is ErrorKind.ALREADY_EXISTS:
                    logger.info(
                        "Copy target already exists in GCS",
                        extra={"bucket": self.bucket_name, "object_name": name},
                    )
                    return StoreResult.exists(name)
                raise self._unexpected("copy", name, e) from e

        logger.info(
            "Asset copied in GCS",
            extra={"bucket": self.bucket_name, "source": source, "object_name": name},
        )
        return StoreResult.success(name)

    async def delete(self, key: AssetKey | str) -> StoreResult:
        bucket = self._guard.connection.bucket
        name = resolve_object_name(key)

        with operation_scope(name):
            try:
                await asyncio.to_thread(bucket.blob(name).delete, retry=NO_RETRY)
            except Exception as e:
                if classify_error(e) is ErrorKind.NOT_FOUND:
                    return StoreResult.success(name)
                raise self._unexpected("delete", name, e) from e

        logger.info(
            "Asset deleted from GCS",
            extra={"bucket": self.bucket_name, "object_name": name},
        )
        return StoreResult.success(name)

    def _unexpected(self, operation: str, name: str, error: Exception) -> Exception:
        logger.error(
            f"Failed to {operation} asset in GCS",
            extra={"bucket": self.bucket_name, "object_name": name, "error": str(error)},
        )
        location = f"gs://{self.bucket_name}/{name}"
        if classify_error(error) is ErrorKind.CONFIGURATION:
            return ConfigurationError(f"Access denied: {location}", name)
        return StoreTransportError(f"Failed to {operation} {location}: {error}", name)
