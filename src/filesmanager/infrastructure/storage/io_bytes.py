"""Binary file utilities for the storage engine."""

from __future__ import annotations

import os
import stat
import tempfile


_RELAXED_FSYNC_VALUES = {"0", "false", "no", "off", "relaxed", "skip", "disabled"}

# Fixed-length temp names so any name the filesystem accepts can be stored.
TEMP_PREFIX = ".fm-"
TEMP_SUFFIX = ".tmp"


def _read_umask() -> int:
    # os.umask can only be read by setting it; done once at import, before
    # request threads exist.
    current = os.umask(0)
    os.umask(current)
    return current


_PROCESS_UMASK = _read_umask()


def fsync_enabled() -> bool:
    """Check if fsync is enabled for atomic writes."""
    value = os.environ.get("FILESMANAGER_IO_FSYNC", "strict").strip().lower()
    return value not in _RELAXED_FSYNC_VALUES


def is_temp_name(name: str) -> bool:
    """True for in-flight (or crash-orphaned) atomic write temp files."""
    return name.startswith(TEMP_PREFIX) and name.endswith(TEMP_SUFFIX)


def ensure_parent_dir(path: str) -> None:
    """Ensure parent directory exists."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def _target_mode(path: str) -> int:
    """Mode for the replacement file: keep an existing file's, else honour the umask."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        return 0o666 & ~_PROCESS_UMASK


def write_bytes_atomic(path: str, data: bytes, *, fsync: bool = True) -> int:
    """Write `data` to `path` through a sibling temp file and `os.replace`.

    Readers see either the previous content or the new one, never a torn
    file. Returns the number of bytes written.
    """
    ensure_parent_dir(path)
    fd, tmp_path = tempfile.mkstemp(
        prefix=TEMP_PREFIX,
        suffix=TEMP_SUFFIX,
        dir=os.path.dirname(path) or None,
    )
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data or b"")
            handle.flush()
            if fsync:
                os.fsync(handle.fileno())
        os.chmod(tmp_path, _target_mode(path))
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise
    return len(data or b"")


def read_bytes(path: str) -> bytes:
    with open(path, "rb") as handle:
        return handle.read()
