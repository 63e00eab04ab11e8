"""Per-adapter metadata and content cache."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional


@dataclass(frozen=True)
class CacheEntry:
    """Last known state of one storage key.

    ``content`` is only set once a read or write has seen the body; entries
    created from metadata lookups carry size and timestamp alone.
    """

    size: int
    last_modified: datetime
    version_tag: str = ""
    content: Optional[str] = None

    @property
    def has_content(self) -> bool:
        return self.content is not None


class MetadataCache:
    """Unbounded key -> CacheEntry mapping with no eviction or expiry.

    Not synchronized; callers sharing one instance across threads must
    serialize access to the same key themselves.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def put(self, key: str, entry: CacheEntry) -> None:
        self._entries[key] = entry

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
