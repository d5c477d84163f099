"""Pytest configuration and shared fixtures."""

import threading
from typing import BinaryIO, Dict, List, Tuple
from unittest.mock import patch

import pytest
from google.api_core.exceptions import NotFound, PreconditionFailed

from assetstore.storage.folder import FolderAssetStore
from assetstore.storage.gcs import GCSAssetStore
from assetstore.storage.memory import MemoryAssetStore


# Stands in for the client library default retry policy
LIBRARY_DEFAULT_RETRY = object()


class FakeBlob:
    """Blob handle of the fake bucket."""

    def __init__(self, bucket: "FakeBucket", name: str):
        self.bucket = bucket
        self.name = name

    def upload_from_file(
        self, file_obj: BinaryIO, content_type=None, if_generation_match=None, retry=LIBRARY_DEFAULT_RETRY
    ):
        self.bucket.record_retry("upload", retry)
        self.bucket.raise_injected("upload")
        self.bucket.write(self.name, file_obj.read(), if_generation_match)

    def download_to_file(self, file_obj: BinaryIO, retry=LIBRARY_DEFAULT_RETRY):
        self.bucket.record_retry("download", retry)
        self.bucket.raise_injected("download")
        file_obj.write(self.bucket.read(self.name))

    def delete(self, retry=LIBRARY_DEFAULT_RETRY):
        self.bucket.record_retry("delete", retry)
        self.bucket.raise_injected("delete")
        self.bucket.remove(self.name)


class FakeBucket:
    """Thread-safe bucket honouring ``ifGenerationMatch`` like GCS does.

    Failures can be injected per operation with ``inject``.
    """

    def __init__(self, name: str):
        self.name = name
        self.objects: Dict[str, Tuple[int, bytes]] = {}
        self.injected: Dict[str, Exception] = {}
        self.retries: List[Tuple[str, object]] = []
        self._generation = 0
        self._lock = threading.Lock()

    def inject(self, operation: str, error: Exception) -> None:
        self.injected[operation] = error

    def record_retry(self, operation: str, retry) -> None:
        self.retries.append((operation, retry))

    def raise_injected(self, operation: str) -> None:
        error = self.injected.get(operation)
        if error is not None:
            raise error

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self, name)

    def copy_blob(
        self,
        blob: FakeBlob,
        destination_bucket: "FakeBucket",
        new_name=None,
        if_generation_match=None,
        retry=LIBRARY_DEFAULT_RETRY,
    ):
        self.record_retry("copy", retry)
        self.raise_injected("copy")
        data = self.read(blob.name)
        destination_bucket.write(new_name or blob.name, data, if_generation_match)
        return destination_bucket.blob(new_name or blob.name)

    def write(self, name: str, data: bytes, if_generation_match) -> None:
        with self._lock:
            current = self.objects.get(name)
            current_generation = current[0] if current else 0
            if if_generation_match is not None and if_generation_match != current_generation:
                raise PreconditionFailed(f"At least one of the pre-conditions you specified did not hold: {name}")
            self._generation += 1
            self.objects[name] = (self._generation, data)

    def read(self, name: str) -> bytes:
        with self._lock:
            if name not in self.objects:
                raise NotFound(f"No such object: {self.name}/{name}")
            return self.objects[name][1]

    def remove(self, name: str) -> None:
        with self._lock:
            if name not in self.objects:
                raise NotFound(f"No such object: {self.name}/{name}")
            del self.objects[name]


class FakeGCSClient:
    """Storage client exposing a single fake bucket."""

    def __init__(self, bucket: FakeBucket):
        self._bucket = bucket

    def get_bucket(self, bucket_name: str, retry=LIBRARY_DEFAULT_RETRY) -> FakeBucket:
        self._bucket.record_retry("get_bucket", retry)
        if bucket_name != self._bucket.name:
            raise NotFound(f"The specified bucket does not exist: {bucket_name}")
        return self._bucket


@pytest.fixture
def fake_bucket():
    """Create an empty fake GCS bucket."""
    return FakeBucket("test-bucket")


@pytest.fixture
def mock_storage_client(fake_bucket):
    """Patch the GCS client class to hand out the fake bucket."""
    with patch("assetstore.storage.gcs.storage.Client") as mock_client:
        mock_client.return_value = FakeGCSClient(fake_bucket)
        yield mock_client


@pytest.fixture(params=["memory", "folder", "gcs"])
def store(request, tmp_path):
    """Uninitialized asset store for every backend."""
    if request.param == "memory":
        return MemoryAssetStore()
    if request.param == "folder":
        return FolderAssetStore(tmp_path / "assets")
    request.getfixturevalue("mock_storage_client")
    return GCSAssetStore(bucket_name="test-bucket", project_id="test-project")
