"""Abstract object-storage backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class ObjectInfo:
    """Metadata reported by the backend for one object.

    Any field except ``key`` may be missing when the backend omits it.
    """

    key: str
    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None


@dataclass(frozen=True)
class ObjectData:
    info: ObjectInfo
    body: bytes = b""


@dataclass(frozen=True)
class ObjectListing:
    objects: List[ObjectInfo] = field(default_factory=list)
    common_prefixes: List[str] = field(default_factory=list)

    @property
    def keys(self) -> List[str]:
        return [obj.key for obj in self.objects]


class ObjectBackend(ABC):
    """Abstract interface for the five object-storage primitives.

    Implementations raise ``BackendError`` for every failure, with ``kind``
    set to one of the ``ErrorKind`` values. A missing key is always reported
    as ``ErrorKind.NOT_FOUND``.
    """

    @abstractmethod
    def get_object(self, key: str) -> ObjectData:
        """
        Fetch an object's body and metadata.

        Args:
            key: Storage key (e.g., "myapp/config.json")

        Returns:
            ObjectData with the full body

        Raises:
            BackendError: NOT_FOUND if the key does not exist, other kinds otherwise
        """
        pass

    @abstractmethod
    def put_object(self, key: str, body: bytes, content_type: str) -> str:
        """
        Store an object, replacing any existing one.

        Args:
            key: Storage key
            body: Object contents
            content_type: MIME type recorded with the object

        Returns:
            Version tag (ETag) assigned by the backend, or "" if none

        Raises:
            BackendError: On any failure
        """
        pass

    @abstractmethod
    def delete_object(self, key: str) -> None:
        """
        Delete an object.

        Args:
            key: Storage key

        Raises:
            BackendError: On any failure
        """
        pass

    @abstractmethod
    def head_object(self, key: str) -> ObjectInfo:
        """
        Fetch an object's metadata without its body.

        Args:
            key: Storage key

        Returns:
            ObjectInfo for the key

        Raises:
            BackendError: NOT_FOUND if the key does not exist, other kinds otherwise
        """
        pass

    @abstractmethod
    def list_objects(self, prefix: str, delimiter: Optional[str] = None) -> ObjectListing:
        """
        List objects whose keys start with prefix.

        Args:
            prefix: Key prefix (e.g., "myapp/reports/")
            delimiter: When set, keys containing the delimiter after the prefix
                are rolled up into common prefixes instead of being listed

        Returns:
            ObjectListing with every page merged

        Raises:
            BackendError: On any failure
        """
        pass
