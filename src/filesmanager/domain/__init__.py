"""Domain models for Files Manager."""

from .errors import (
    BootstrapFailure,
    FilesManagerError,
    NotFoundError,
    PathEscapeError,
    StorageIOError,
)
from .files import DIRECTORY, FILE, SYMLINK, FileEntry

__all__ = [
    "BootstrapFailure",
    "FilesManagerError",
    "NotFoundError",
    "PathEscapeError",
    "StorageIOError",
    "DIRECTORY",
    "FILE",
    "SYMLINK",
    "FileEntry",
]
