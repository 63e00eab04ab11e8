"""Filesystem-style access to S3 and S3-compatible object storage."""

from bucketfs.core.errors import BackendError, InvalidArgumentError, NotFoundError, StorageError
from bucketfs.filesystem import (
    BucketInfo,
    FileStats,
    FileSystem,
    S3FileSystem,
    S3FileSystemOptions,
    create_s3_filesystem,
)

__all__ = [
    "BackendError",
    "BucketInfo",
    "FileStats",
    "FileSystem",
    "InvalidArgumentError",
    "NotFoundError",
    "S3FileSystem",
    "S3FileSystemOptions",
    "StorageError",
    "create_s3_filesystem",
]
