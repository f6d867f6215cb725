"""Domain errors."""


class FilesManagerError(Exception):
    """Base error, tagged with the offending path and the operation."""

    def __init__(self, message: str, path: str = "", operation: str = ""):
        self.path = path
        self.operation = operation
        self.reason = message
        super().__init__(f"[{operation}] {path}: {message}" if operation else message)


class PathEscapeError(FilesManagerError, ValueError):
    """Resolved path falls outside the storage root."""
    pass


class NotFoundError(FilesManagerError):
    """Target does not exist."""
    pass


class StorageIOError(FilesManagerError):
    """Underlying filesystem call failed."""
    pass


class BootstrapFailure(FilesManagerError):
    """No usable storage root could be established."""
    pass
