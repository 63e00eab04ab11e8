from __future__ import annotations

from datetime import datetime, timezone

import pytest

from bucketfs.core.errors import BackendError, ErrorKind
from bucketfs.filesystem.s3 import S3FileSystem, S3FileSystemOptions
from bucketfs.storage.backend import ObjectBackend, ObjectData, ObjectInfo, ObjectListing

FIXED_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


class RecordingBackend(ObjectBackend):
    """In-memory backend that records every primitive call."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.calls: list[tuple] = []
        self.failures: dict[tuple[str, str], BackendError] = {}
        self.vanished: set[str] = set()
        self.partial_metadata = False
        self.on_delete = None

    def fail(self, operation: str, key: str, kind: str = ErrorKind.UNKNOWN) -> None:
        self.failures[(operation, key)] = BackendError(f"{operation} failed for {key}", kind=kind, path=key)

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)

    def _check(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        if (operation, key) in self.failures:
            raise self.failures[(operation, key)]

    def _missing(self, key: str) -> BackendError:
        return BackendError(f"NoSuchKey: {key}", kind=ErrorKind.NOT_FOUND, path=key)

    def get_object(self, key: str) -> ObjectData:
        self._check("get", key)
        if key not in self.objects:
            raise self._missing(key)
        body = self.objects[key]
        info = ObjectInfo(key=key, size=len(body), last_modified=FIXED_TIME, etag='"etag"')
        return ObjectData(info=info, body=body)

    def put_object(self, key: str, body: bytes, content_type: str) -> str:
        self._check("put", key)
        self.objects[key] = body
        self.content_types[key] = content_type
        return '"etag"'

    def delete_object(self, key: str) -> None:
        self._check("delete", key)
        if self.on_delete is not None:
            self.on_delete(key)
        if key in self.vanished:
            raise self._missing(key)
        self.objects.pop(key, None)

    def head_object(self, key: str) -> ObjectInfo:
        self._check("head", key)
        if key not in self.objects:
            raise self._missing(key)
        if self.partial_metadata:
            return ObjectInfo(key=key)
        return ObjectInfo(key=key, size=len(self.objects[key]), last_modified=FIXED_TIME, etag='"etag"')

    def list_objects(self, prefix: str, delimiter: str | None = None) -> ObjectListing:
        self._check("list", prefix)
        objects = []
        common_prefixes = []
        for key in sorted(self.objects):
            if not key.startswith(prefix):
                continue
            remainder = key[len(prefix):]
            if delimiter and delimiter in remainder:
                common = prefix + remainder.split(delimiter, 1)[0] + delimiter
                if common not in common_prefixes:
                    common_prefixes.append(common)
                continue
            objects.append(ObjectInfo(key=key, size=len(self.objects[key])))
        return ObjectListing(objects=objects, common_prefixes=common_prefixes)


@pytest.fixture
def fixed_time() -> datetime:
    return FIXED_TIME


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def options() -> S3FileSystemOptions:
    return S3FileSystemOptions(region="us-east-1", bucket="test-bucket")


@pytest.fixture
def fs(options, backend) -> S3FileSystem:
    return S3FileSystem(options, backend=backend)
