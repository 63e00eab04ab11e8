"""Filesystem-style access to object storage."""

from bucketfs.filesystem.cache import CacheEntry, MetadataCache
from bucketfs.filesystem.interface import FileStats, FileSystem
from bucketfs.filesystem.keys import content_type_for, normalize_path, to_key
from bucketfs.filesystem.s3 import BucketInfo, S3FileSystem, S3FileSystemOptions, create_s3_filesystem

__all__ = [
    "BucketInfo",
    "CacheEntry",
    "FileStats",
    "FileSystem",
    "MetadataCache",
    "S3FileSystem",
    "S3FileSystemOptions",
    "content_type_for",
    "create_s3_filesystem",
    "normalize_path",
    "to_key",
]
