"""Object-storage backends consumed by the filesystem adapter."""

from bucketfs.storage.backend import ObjectBackend, ObjectData, ObjectInfo, ObjectListing
from bucketfs.storage.local_backend import LocalObjectBackend
from bucketfs.storage.s3_backend import S3Backend

__all__ = [
    "ObjectBackend",
    "ObjectData",
    "ObjectInfo",
    "ObjectListing",
    "LocalObjectBackend",
    "S3Backend",
]
