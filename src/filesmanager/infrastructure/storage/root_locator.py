"""Storage root discovery, run once at startup.

Candidates, in order:
- the configured location, if it is usable
- a per-user application data directory
- a `filesmanager` directory under the system temp dir
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog

from filesmanager.domain.errors import BootstrapFailure

logger = structlog.get_logger()

APP_DIR_WINDOWS = "FilesManager"
APP_DIR_POSIX = ".filesmanager"
TEMP_DIR_NAME = "filesmanager"


def is_location_usable(path: Path) -> bool:
    """Check whether `path` can serve as the storage root.

    A missing path needs an existing, writable parent. An existing path
    must be a directory the process can read, write and traverse.
    """
    try:
        if not path.exists():
            parent = path.parent
            if parent == path or not parent.is_dir():
                return False
            return os.access(parent, os.W_OK)
        if not path.is_dir():
            return False
        return os.access(path, os.R_OK | os.W_OK | os.X_OK)
    except OSError as exc:
        logger.warning("storage_location_check_failed", path=str(path), error=str(exc))
        return False


def user_data_dir(home: Optional[Path] = None, *, windows: Optional[bool] = None) -> Path:
    base = Path(home) if home is not None else Path.home()
    if windows is None:
        windows = os.name == "nt"
    if windows:
        return base / "AppData" / "Local" / APP_DIR_WINDOWS
    return base / APP_DIR_POSIX


def _absolute(path: str | Path) -> Path:
    expanded = os.path.expandvars(os.path.expanduser(str(path)))
    return Path(os.path.abspath(expanded))


def _create(path: Path) -> bool:
    try:
        path.mkdir(parents=True, exist_ok=True)
        return True
    except OSError as exc:
        logger.warning("storage_location_create_failed", path=str(path), error=str(exc))
        return False


def locate_storage_root(
    configured: Optional[str] = None,
    *,
    home: Optional[Path] = None,
    temp_dir: Optional[Path] = None,
    windows: Optional[bool] = None,
) -> Path:
    """Pick, create and return the storage root.

    Raises:
        BootstrapFailure: if not even the temp fallback can be created.
    """
    if configured is not None and str(configured).strip():
        candidate = _absolute(str(configured).strip())
        if is_location_usable(candidate) and _create(candidate):
            logger.info("storage_root_selected", source="configured", path=str(candidate))
            return candidate
        logger.warning("configured_storage_unusable", path=str(candidate))

    candidate = user_data_dir(home, windows=windows)
    if is_location_usable(candidate) and _create(candidate):
        logger.info("storage_root_selected", source="user_data", path=str(candidate))
        return candidate

    base = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())
    candidate = _absolute(base / TEMP_DIR_NAME)
    logger.warning("storage_root_temp_fallback", path=str(candidate))
    try:
        candidate.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("storage_bootstrap_failed", path=str(candidate), error=str(exc))
        raise BootstrapFailure(
            f"unable to initialise storage: {exc}", str(candidate), "bootstrap"
        ) from exc
    if not candidate.is_dir():
        raise BootstrapFailure("fallback storage is not a directory", str(candidate), "bootstrap")
    return candidate
