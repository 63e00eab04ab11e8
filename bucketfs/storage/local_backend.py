"""Local filesystem object backend."""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from bucketfs.core.errors import BackendError, ErrorKind
from bucketfs.storage.backend import ObjectBackend, ObjectData, ObjectInfo, ObjectListing


def _etag(content: bytes) -> str:
    return f'"{hashlib.md5(content).hexdigest()}"'


class LocalObjectBackend(ObjectBackend):
    """Object backend that stores each key as a file under a base directory."""

    def __init__(self, base_path: str):
        """
        Initialize local object backend.

        Args:
            base_path: Base directory standing in for the bucket (e.g., "/shared/bucket")
        """
        self.base_path = Path(base_path)
        if not self.base_path.exists():
            raise ValueError(f"Base path does not exist: {base_path}")
        self.root = self.base_path.resolve()

    def _resolve_path(self, key: str) -> Path:
        """Convert object key to an absolute path inside the base directory."""
        file_path = (self.root / key.lstrip("/")).resolve()
        if not file_path.is_relative_to(self.root):
            raise BackendError(f"Key escapes base path: {key}", ErrorKind.ACCESS_DENIED, key)
        return file_path

    @staticmethod
    def _info(key: str, file_path: Path, etag: str | None = None) -> ObjectInfo:
        stat = file_path.stat()
        return ObjectInfo(
            key=key,
            size=stat.st_size,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            etag=etag,
        )

    def get_object(self, key: str) -> ObjectData:
        file_path = self._resolve_path(key)
        try:
            content = file_path.read_bytes()
            return ObjectData(info=self._info(key, file_path, _etag(content)), body=content)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise BackendError(f"Object not found: {key}", ErrorKind.NOT_FOUND, key) from exc
        except PermissionError as exc:
            raise BackendError(f"Permission denied: {key}", ErrorKind.ACCESS_DENIED, key) from exc
        except OSError as exc:
            raise BackendError(f"Failed to read object: {key}", ErrorKind.UNKNOWN, key) from exc

    def put_object(self, key: str, body: bytes, content_type: str) -> str:
        file_path = self._resolve_path(key)
        try:
            # Create parent directories
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(body)
        except PermissionError as exc:
            raise BackendError(f"Permission denied: {key}", ErrorKind.ACCESS_DENIED, key) from exc
        except OSError as exc:
            raise BackendError(f"Failed to write object: {key}", ErrorKind.UNKNOWN, key) from exc
        return _etag(body)

    def delete_object(self, key: str) -> None:
        file_path = self._resolve_path(key)
        try:
            if file_path.is_file():
                file_path.unlink()
        except PermissionError as exc:
            raise BackendError(f"Permission denied: {key}", ErrorKind.ACCESS_DENIED, key) from exc
        except OSError as exc:
            raise BackendError(f"Failed to delete object: {key}", ErrorKind.UNKNOWN, key) from exc

    def head_object(self, key: str) -> ObjectInfo:
        file_path = self._resolve_path(key)
        if not file_path.is_file():
            raise BackendError(f"Object not found: {key}", ErrorKind.NOT_FOUND, key)
        try:
            return self._info(key, file_path)
        except OSError as exc:
            raise BackendError(f"Failed to stat object: {key}", ErrorKind.UNKNOWN, key) from exc

    def list_objects(self, prefix: str, delimiter: Optional[str] = None) -> ObjectListing:
        # Only the directory holding the prefix can contain matching keys
        if not prefix or prefix.endswith("/"):
            search_root = self._resolve_path(prefix)
        else:
            search_root = self._resolve_path(prefix).parent

        objects: List[ObjectInfo] = []
        common_prefixes: List[str] = []
        if not search_root.is_dir():
            return ObjectListing()

        try:
            paths = sorted(path for path in search_root.rglob("*") if path.is_file())
            for path in paths:
                key = path.relative_to(self.root).as_posix()
                if not key.startswith(prefix):
                    continue
                remainder = key[len(prefix):]
                if delimiter and delimiter in remainder:
                    common = prefix + remainder[: remainder.index(delimiter) + len(delimiter)]
                    if common not in common_prefixes:
                        common_prefixes.append(common)
                    continue
                objects.append(self._info(key, path))
        except OSError as exc:
            raise BackendError(f"Failed to list objects under {prefix!r}", ErrorKind.UNKNOWN, prefix) from exc
        return ObjectListing(objects=objects, common_prefixes=common_prefixes)
