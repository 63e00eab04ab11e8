"""Path to storage key translation."""

from __future__ import annotations

import re

_REPEATED_SLASHES = re.compile(r"/+")
_LEADING_DOTS_AND_SLASHES = re.compile(r"^(?:\./|/)+")

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES = {
    "json": "application/json",
    "txt": "text/plain",
    "html": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "xml": "application/xml",
    "md": "text/markdown",
}


def normalize_path(path: str) -> str:
    """Collapse repeated slashes and strip leading "./" and "/" segments."""
    collapsed = _REPEATED_SLASHES.sub("/", path)
    return _LEADING_DOTS_AND_SLASHES.sub("", collapsed)


def normalize_prefix(prefix: str) -> str:
    return normalize_path(prefix or "").strip("/")


def to_key(path: str, prefix: str = "") -> str:
    """
    Convert a filesystem-style path into a storage key.

    Args:
        path: Filesystem path (e.g., "./reports//q1.json" or "/config.json")
        prefix: Namespace prefix prepended to every key (e.g., "myapp/")

    Returns:
        Storage key (e.g., "myapp/reports/q1.json")
    """
    normalized = normalize_path(path)
    namespace = normalize_prefix(prefix)
    if not namespace:
        return normalized
    if not normalized:
        return namespace
    return f"{namespace}/{normalized}"


def directory_prefix(key: str) -> str:
    """Listing prefix for a virtual directory key; the bucket root stays empty."""
    if not key:
        return ""
    return key if key.endswith("/") else f"{key}/"


def content_type_for(path: str) -> str:
    """Content type from the text after the last ".", so ".json" is JSON too."""
    ext = path.lower().rsplit(".", 1)[-1] if "." in path else ""
    return CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)
