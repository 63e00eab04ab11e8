"""Filesystem adapter over an S3 bucket."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from bucketfs.core.errors import BackendError, InvalidArgumentError, NotFoundError
from bucketfs.core.logging import bind_context
from bucketfs.filesystem.cache import CacheEntry, MetadataCache
from bucketfs.filesystem.interface import FileStats, FileSystem
from bucketfs.filesystem.keys import content_type_for, directory_prefix, to_key
from bucketfs.storage.backend import ObjectBackend, ObjectInfo


@dataclass(frozen=True)
class S3FileSystemOptions:
    region: str
    bucket: str
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None
    # Acts as the root directory for every operation
    prefix: str = ""
    endpoint_url: Optional[str] = None
    force_path_style: bool = False
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    max_attempts: int = 3

    def validate(self) -> None:
        if not self.region:
            raise ValueError("region is required")
        if not self.bucket:
            raise ValueError("bucket is required")
        if self.connect_timeout <= 0 or self.read_timeout <= 0:
            raise ValueError("timeouts must be > 0")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")


@dataclass(frozen=True)
class BucketInfo:
    bucket: str
    region: str
    prefix: str


def _now() -> datetime:
    return datetime.now(timezone.utc)


class S3FileSystem(FileSystem):
    """
    Filesystem operations on AWS S3 or S3-compatible storage.

    Each file maps to one object; directories exist only as key prefixes.
    Metadata and content seen by this instance are cached per key for the
    lifetime of the instance.
    """

    def __init__(
        self,
        options: S3FileSystemOptions,
        backend: Optional[ObjectBackend] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the adapter.

        Args:
            options: Bucket, region, credentials and namespace prefix
            backend: Object backend to use; an S3Backend is built from options if omitted
            logger: Logger for operation messages (default: module logger)
        """
        options.validate()
        self.options = options
        self.logger = bind_context(logger or logging.getLogger(__name__), bucket=options.bucket)
        self.cache = MetadataCache()

        if backend is None:
            from bucketfs.storage.s3_backend import S3Backend

            backend = S3Backend(
                bucket_name=options.bucket,
                region=options.region,
                access_key_id=options.access_key_id,
                secret_access_key=options.secret_access_key,
                session_token=options.session_token,
                endpoint_url=options.endpoint_url,
                force_path_style=options.force_path_style,
                connect_timeout=options.connect_timeout,
                read_timeout=options.read_timeout,
                max_attempts=options.max_attempts,
            )
        self.backend = backend

    def _key(self, path: str) -> str:
        return to_key(path, self.options.prefix)

    def _cache_metadata(self, key: str, info: ObjectInfo) -> CacheEntry:
        entry = CacheEntry(
            size=info.size or 0,
            last_modified=info.last_modified or _now(),
            version_tag=info.etag or "",
        )
        self.cache.put(key, entry)
        return entry

    def exists(self, path: str) -> bool:
        key = self._key(path)
        if key in self.cache:
            return True

        try:
            info = self.backend.head_object(key)
        except BackendError as exc:
            if exc.is_not_found:
                return False
            raise BackendError(
                f"Failed to check file existence for {path}: {exc}", kind=exc.kind, path=path
            ) from exc

        self._cache_metadata(key, info)
        return True

    def read_file(self, path: str) -> str:
        key = self._key(path)
        cached = self.cache.get(key)
        if cached is not None and cached.has_content:
            self.logger.debug(f"[S3FileSystem] Cache hit for {key}", extra={"key": key})
            return cached.content

        try:
            data = self.backend.get_object(key)
        except BackendError as exc:
            if exc.is_not_found:
                raise NotFoundError(f"File not found: {path}", path=path) from exc
            self.logger.warning(f"[S3FileSystem] Read failed for {key}: {exc}", extra={"key": key})
            raise BackendError(f"Failed to read file {path}: {exc}", kind=exc.kind, path=path) from exc

        body = data.body or b""
        last_modified = data.info.last_modified or _now()
        version_tag = data.info.etag or ""
        try:
            content = body.decode("utf-8")
        except UnicodeDecodeError:
            # Lossy text is returned but never cached, so size stays the object's byte length
            self.logger.warning(f"[S3FileSystem] {key} is not valid UTF-8", extra={"key": key})
            self.cache.put(key, CacheEntry(size=len(body), last_modified=last_modified, version_tag=version_tag))
            return body.decode("utf-8", errors="replace")

        self.cache.put(
            key,
            CacheEntry(
                size=len(body),
                last_modified=last_modified,
                version_tag=version_tag,
                content=content,
            ),
        )
        return content

    def write_file(self, path: str, data: Optional[str]) -> None:
        if data is None:
            raise InvalidArgumentError("Data parameter is required")

        key = self._key(path)
        body = data.encode("utf-8")
        try:
            etag = self.backend.put_object(key, body, content_type_for(path))
        except BackendError as exc:
            self.logger.warning(f"[S3FileSystem] Write failed for {key}: {exc}", extra={"key": key})
            raise BackendError(f"Failed to write file {path}: {exc}", kind=exc.kind, path=path) from exc

        self.cache.put(
            key,
            CacheEntry(size=len(body), last_modified=_now(), version_tag=etag or "", content=data),
        )
        self.logger.info(f"[S3FileSystem] Wrote {len(body)} bytes to {key}", extra={"key": key})

    def delete_file(self, path: str) -> None:
        key = self._key(path)
        try:
            self.backend.delete_object(key)
        except BackendError as exc:
            if not exc.is_not_found:
                raise BackendError(f"Failed to delete file {path}: {exc}", kind=exc.kind, path=path) from exc
            self.logger.debug(f"[S3FileSystem] {key} already absent", extra={"key": key})
        finally:
            self.cache.remove(key)
        self.logger.info(f"[S3FileSystem] Deleted {key}", extra={"key": key})

    def delete_dir(self, path: str) -> None:
        key = self._key(path)
        prefix = key if key.endswith("/") else f"{key}/"

        try:
            listing = self.backend.list_objects(prefix)
        except BackendError as exc:
            raise BackendError(f"Failed to delete directory {path}: {exc}", kind=exc.kind, path=path) from exc

        if not listing.objects:
            return

        # Sequential; a failure leaves earlier deletes in place
        for obj in listing.objects:
            try:
                self.backend.delete_object(obj.key)
            except BackendError as exc:
                if not exc.is_not_found:
                    self.cache.remove(obj.key)
                    self.logger.warning(
                        f"[S3FileSystem] Directory delete stopped at {obj.key}: {exc}",
                        extra={"path": path, "key": obj.key},
                    )
                    raise BackendError(
                        f"Failed to delete directory {path}: {exc}", kind=exc.kind, path=path
                    ) from exc
            self.cache.remove(obj.key)

        self.logger.info(
            f"[S3FileSystem] Deleted {len(listing.objects)} objects under {prefix}",
            extra={"path": path},
        )

    def ensure_dir(self, path: str) -> None:
        # Directories are implicit in object keys
        return None

    def read_dir(self, path: str) -> List[str]:
        prefix = directory_prefix(self._key(path))

        try:
            listing = self.backend.list_objects(prefix, delimiter="/")
        except BackendError as exc:
            if exc.is_not_found:
                return []
            raise BackendError(f"Failed to read directory {path}: {exc}", kind=exc.kind, path=path) from exc

        entries: List[str] = []
        for obj in listing.objects:
            if obj.key == prefix or not obj.key.startswith(prefix):
                continue
            name = obj.key[len(prefix):]
            if name and "/" not in name and name not in entries:
                entries.append(name)

        for common_prefix in listing.common_prefixes:
            if not common_prefix.startswith(prefix):
                continue
            dir_name = common_prefix[len(prefix):].split("/", 1)[0]
            if dir_name and f"{dir_name}/" not in entries:
                entries.append(f"{dir_name}/")

        return entries

    def chmod(self, path: str, mode: int) -> None:
        # No POSIX permission model on objects
        return None

    def stat(self, path: str) -> FileStats:
        key = self._key(path)
        cached = self.cache.get(key)
        if cached is not None:
            return FileStats.for_object(cached.size, cached.last_modified)

        try:
            info = self.backend.head_object(key)
        except BackendError as exc:
            if exc.is_not_found:
                raise NotFoundError(f"File not found: {path}", path=path) from exc
            raise BackendError(f"Failed to get file stats for {path}: {exc}", kind=exc.kind, path=path) from exc

        entry = self._cache_metadata(key, info)
        return FileStats.for_object(entry.size, entry.last_modified)

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_bucket_info(self) -> BucketInfo:
        return BucketInfo(
            bucket=self.options.bucket,
            region=self.options.region,
            prefix=self.options.prefix,
        )


def create_s3_filesystem(
    options: S3FileSystemOptions,
    backend: Optional[ObjectBackend] = None,
) -> S3FileSystem:
    return S3FileSystem(options, backend=backend)
