from __future__ import annotations


class ErrorKind:
    NOT_FOUND = "NOT_FOUND"
    ACCESS_DENIED = "ACCESS_DENIED"
    TIMEOUT = "TIMEOUT"
    UNAVAILABLE = "UNAVAILABLE"
    UNKNOWN = "UNKNOWN"


class StorageError(Exception):
    error_type = "UNKNOWN"


class NotFoundError(StorageError):
    error_type = "NOT_FOUND"

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class InvalidArgumentError(StorageError):
    error_type = "INVALID_ARGUMENT"


class BackendError(StorageError):
    error_type = "BACKEND"

    def __init__(
        self,
        message: str,
        kind: str = ErrorKind.UNKNOWN,
        path: str | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.path = path

    @property
    def is_not_found(self) -> bool:
        return self.kind == ErrorKind.NOT_FOUND


def classify_error(error: Exception) -> str:
    if isinstance(error, BackendError):
        return error.kind
    if isinstance(error, NotFoundError):
        return ErrorKind.NOT_FOUND

    message = str(error).lower()

    if "timeout" in message or "timed out" in message:
        return ErrorKind.TIMEOUT

    if "not found" in message or "no such" in message or "nosuch" in message or "404" in message:
        return ErrorKind.NOT_FOUND

    if "permission" in message or "access denied" in message or "403" in message:
        return ErrorKind.ACCESS_DENIED

    if "connection" in message or "network" in message or "unavailable" in message:
        return ErrorKind.UNAVAILABLE

    return ErrorKind.UNKNOWN
