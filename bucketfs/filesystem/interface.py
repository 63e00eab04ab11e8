"""Filesystem-style interface implemented on top of object storage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

DEFAULT_FILE_MODE = 0o644


@dataclass(frozen=True)
class FileStats:
    """Stat result synthesized from object metadata.

    Object storage has no directories, symlinks or separate access/creation
    times, so every timestamp is the last-modified time.
    """

    size: int
    mtime: datetime
    ctime: datetime
    atime: datetime
    mode: int = DEFAULT_FILE_MODE

    @classmethod
    def for_object(cls, size: int, last_modified: datetime) -> "FileStats":
        return cls(size=size, mtime=last_modified, ctime=last_modified, atime=last_modified)

    def is_file(self) -> bool:
        return True

    def is_dir(self) -> bool:
        return False

    def is_symlink(self) -> bool:
        return False


class FileSystem(ABC):
    """Abstract interface for filesystem operations."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """
        Check if a file exists.

        Args:
            path: File path (e.g., "reports/q1.json")

        Returns:
            True if the file exists, False otherwise

        Raises:
            BackendError: If existence could not be determined
        """
        pass

    @abstractmethod
    def read_file(self, path: str) -> str:
        """
        Read file contents as text.

        Args:
            path: File path

        Returns:
            File contents decoded as UTF-8

        Raises:
            NotFoundError: If the file does not exist
            BackendError: On any other storage failure
        """
        pass

    @abstractmethod
    def write_file(self, path: str, data: Optional[str]) -> None:
        """
        Write file contents, replacing any existing file.

        Args:
            path: File path
            data: File contents; an empty string is valid

        Raises:
            InvalidArgumentError: If data is None
            BackendError: On storage failure
        """
        pass

    @abstractmethod
    def delete_file(self, path: str) -> None:
        """
        Delete a file. Deleting a missing file is not an error.

        Raises:
            BackendError: On storage failure other than a missing file
        """
        pass

    @abstractmethod
    def read_dir(self, path: str) -> List[str]:
        """
        List immediate children of a directory.

        Args:
            path: Directory path ("" for the root)

        Returns:
            File names, then sub-directory names with a trailing "/"
        """
        pass

    @abstractmethod
    def ensure_dir(self, path: str) -> None:
        """Make sure a directory exists."""
        pass

    @abstractmethod
    def delete_dir(self, path: str) -> None:
        """
        Delete a directory and everything below it.

        Raises:
            BackendError: If listing or any single delete fails
        """
        pass

    @abstractmethod
    def chmod(self, path: str, mode: int) -> None:
        """Change file permissions."""
        pass

    @abstractmethod
    def stat(self, path: str) -> FileStats:
        """
        Get file statistics.

        Raises:
            NotFoundError: If the file does not exist
            BackendError: On any other storage failure
        """
        pass
