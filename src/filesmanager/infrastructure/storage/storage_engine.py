"""Filesystem storage engine.

Every operation resolves its path through `path_guard` first and performs
no I/O when the resolver rejects it. The engine keeps no cache: each call
re-reads the tree under the root.

Examples:
    >>> storage = FileSystemStorage("/srv/files")
    >>> _ = storage.store_file("2025/Janvier/Factures/invoice.pdf", b"%PDF")
    >>> storage.list_files()
    ['2025', '2025/Janvier', '2025/Janvier/Factures', '2025/Janvier/Factures/invoice.pdf']
    >>> storage.delete_directory("2025")
    True
"""

from __future__ import annotations

import os
import shutil
import stat
from datetime import datetime, timezone
from pathlib import Path
from typing import List

import structlog

from filesmanager.domain.errors import NotFoundError, PathEscapeError, StorageIOError
from filesmanager.domain.files import DIRECTORY, FILE, SYMLINK, FileEntry
from filesmanager.infrastructure.storage.io_bytes import (
    is_temp_name,
    read_bytes,
    write_bytes_atomic,
)
from filesmanager.infrastructure.storage.path_guard import (
    PathKind,
    is_within,
    normalize_root,
    relative_to_root,
    resolve_path,
)

logger = structlog.get_logger()


class FileSystemStorage:
    """Storage engine confined to a single root directory."""

    def __init__(
        self,
        root: str | Path,
        *,
        guard_symlinks: bool = True,
        fsync_writes: bool = True,
    ):
        self.root = normalize_root(root)
        if not self.root.is_dir():
            raise NotFoundError("storage root does not exist", str(self.root), "init")
        self.guard_symlinks = guard_symlinks
        self.fsync_writes = fsync_writes
        self._real_root = os.path.realpath(str(self.root))

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def _resolve(
        self,
        relative_path: str,
        kind: PathKind,
        operation: str,
        *,
        follow_leaf: bool = True,
    ) -> Path:
        """Resolve lexically, then run the symlink guard.

        With `follow_leaf=False` only the parent chain is checked, for
        operations that act on a link itself rather than on its target.
        """
        try:
            target = resolve_path(self.root, relative_path, kind)
        except PathEscapeError as exc:
            logger.warning("path_escape_rejected", path=relative_path, operation=operation)
            raise PathEscapeError(exc.reason, relative_path, operation) from exc
        if self.guard_symlinks:
            anchor = target if follow_leaf else target.parent
            self._check_symlinks(anchor, relative_path, operation)
        return target

    def _check_symlinks(self, target: Path, relative_path: str, operation: str) -> None:
        """Reject targets whose nearest existing ancestor resolves outside the root."""
        anchor = str(target)
        while not os.path.lexists(anchor):
            parent = os.path.dirname(anchor)
            if parent == anchor:
                break
            anchor = parent
        real = os.path.realpath(anchor)
        if not is_within(self._real_root, real):
            logger.warning(
                "symlink_escape_rejected",
                path=relative_path,
                operation=operation,
                real_path=real,
            )
            raise PathEscapeError(
                f"path resolves outside storage root through a symlink: {real}",
                relative_path,
                operation,
            )

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def store_file(self, relative_path: str, content: bytes) -> Path:
        """Write `content` at `relative_path`, replacing any existing file.

        Missing parent directories are created. Directories created before
        a later failure are left in place.
        """
        target = self._resolve(relative_path, PathKind.FILE, "store")
        try:
            if target.is_dir():
                raise IsADirectoryError(f"target is a directory: {target}")
            written = write_bytes_atomic(str(target), content, fsync=self.fsync_writes)
        except OSError as exc:
            logger.error("store_file_failed", path=relative_path, error=str(exc))
            raise StorageIOError(str(exc), relative_path, "store") from exc

        logger.info("file_stored", path=relative_path, bytes=written)
        return target

    def create_directory(self, relative_path: str) -> Path:
        target = self._resolve(relative_path, PathKind.DIRECTORY, "mkdir")
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("create_directory_failed", path=relative_path, error=str(exc))
            raise StorageIOError(str(exc), relative_path, "mkdir") from exc

        logger.info("directory_created", path=relative_path)
        return target

    # -------------------------------------------------------------------------
    # Delete Operations
    # -------------------------------------------------------------------------

    def delete_file(self, relative_path: str) -> bool:
        """Delete a file. Returns False when there was nothing to delete."""
        target = self._resolve(relative_path, PathKind.FILE, "delete", follow_leaf=False)
        if not os.path.lexists(target):
            logger.info("file_delete_skipped", path=relative_path, reason="not_found")
            return False
        try:
            if target.is_dir() and not target.is_symlink():
                raise IsADirectoryError(f"target is a directory: {target}")
            target.unlink()
        except FileNotFoundError:
            # Removed by a concurrent request between the check and the unlink.
            return False
        except OSError as exc:
            logger.error("delete_file_failed", path=relative_path, error=str(exc))
            raise StorageIOError(str(exc), relative_path, "delete") from exc

        logger.info("file_deleted", path=relative_path)
        return True

    def delete_directory(self, relative_path: str) -> bool:
        """Delete a directory and everything beneath it.

        A missing directory is not an error. The storage root itself is
        never removed.
        """
        target = self._resolve(relative_path, PathKind.DIRECTORY, "rmdir")
        if target == self.root:
            logger.warning("root_delete_rejected", path=relative_path)
            raise PathEscapeError("cannot delete the storage root", relative_path, "rmdir")
        if not os.path.lexists(target):
            logger.info("directory_delete_skipped", path=relative_path, reason="not_found")
            return False
        try:
            if not target.is_dir() or target.is_symlink():
                raise NotADirectoryError(f"target is not a directory: {target}")
            shutil.rmtree(target)
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.error("delete_directory_failed", path=relative_path, error=str(exc))
            raise StorageIOError(str(exc), relative_path, "rmdir") from exc

        logger.info("directory_deleted", path=relative_path)
        return True

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    def read_file(self, relative_path: str) -> bytes:
        target = self._resolve(relative_path, PathKind.FILE, "read")
        if not target.is_file():
            raise NotFoundError("file not found", relative_path, "read")
        try:
            return read_bytes(str(target))
        except FileNotFoundError as exc:
            raise NotFoundError("file not found", relative_path, "read") from exc
        except OSError as exc:
            logger.error("read_file_failed", path=relative_path, error=str(exc))
            raise StorageIOError(str(exc), relative_path, "read") from exc

    def describe(self, relative_path: str) -> FileEntry:
        """Stat a single file or directory under the root."""
        target = self._resolve(relative_path, PathKind.FILE, "stat")
        try:
            return self._entry(target)
        except FileNotFoundError as exc:
            raise NotFoundError("path not found", relative_path, "stat") from exc
        except OSError as exc:
            raise StorageIOError(str(exc), relative_path, "stat") from exc

    def list_files(self) -> List[str]:
        """Every file and directory under the root, relative and sorted.

        The root itself is excluded.
        """
        return [relative_to_root(self.root, path) for path in self._walk()]

    def list_entries(self) -> List[FileEntry]:
        entries = []
        for path in self._walk():
            try:
                entries.append(self._entry(path))
            except FileNotFoundError:
                # Deleted while walking.
                continue
            except OSError as exc:
                raise StorageIOError(str(exc), relative_to_root(self.root, path), "list") from exc
        return entries

    def _walk(self) -> List[Path]:
        found: List[Path] = []

        def on_error(exc: OSError) -> None:
            if isinstance(exc, FileNotFoundError):
                return
            raise exc

        try:
            for current, dirs, files in os.walk(self.root, onerror=on_error):
                dirs.sort()
                names = dirs + sorted(name for name in files if not is_temp_name(name))
                for name in names:
                    found.append(Path(current) / name)
        except OSError as exc:
            logger.error("list_files_failed", error=str(exc))
            raise StorageIOError(str(exc), "", "list") from exc

        found.sort(key=lambda path: relative_to_root(self.root, path))
        return found

    def _entry(self, path: Path) -> FileEntry:
        # lstat: a link reports itself, never what it points at.
        info = path.lstat()
        if stat.S_ISLNK(info.st_mode):
            kind, size = SYMLINK, 0
        elif stat.S_ISDIR(info.st_mode):
            kind, size = DIRECTORY, 0
        else:
            kind, size = FILE, info.st_size
        return FileEntry(
            path=relative_to_root(self.root, path),
            kind=kind,
            size=size,
            modified_at=datetime.fromtimestamp(info.st_mtime, tz=timezone.utc),
        )
