"""Path guardrails for the managed storage root.

Resolution is lexical only: nothing here touches the filesystem, so the
containment check always runs on the normalized path that will be used.
"""

from __future__ import annotations

import enum
import os
from pathlib import Path, PurePath

from filesmanager.domain.errors import PathEscapeError


class PathKind(str, enum.Enum):
    """Which containment rule applies to a resolved path."""

    FILE = "file"
    DIRECTORY = "directory"


def normalize_root(path: str | Path) -> Path:
    raw = str(path or "").strip()
    if not raw:
        raise ValueError("storage root path is required")
    expanded = os.path.expandvars(os.path.expanduser(raw))
    return Path(os.path.abspath(os.path.normpath(expanded)))


def is_within(root: str | Path, candidate: str | Path) -> bool:
    """True when `candidate` equals `root` or lies beneath it."""
    root_str = str(root)
    candidate_str = str(candidate)
    try:
        return os.path.commonpath([root_str, candidate_str]) == root_str
    except ValueError:
        # Different drives, or mixing absolute and relative paths.
        return False


def resolve_path(root: str | Path, relative: str, kind: PathKind) -> Path:
    """Join `relative` onto `root`, normalize, and enforce containment.

    Files must have their parent directory inside the root (so the root
    itself can never be addressed as a file). Directories may be the root
    or anything beneath it.
    """
    root_path = Path(os.path.abspath(os.path.normpath(str(root))))
    raw = str(relative if relative is not None else "")
    joined = os.path.join(str(root_path), raw)
    resolved = Path(os.path.abspath(os.path.normpath(joined)))

    anchor = resolved.parent if kind is PathKind.FILE else resolved
    if not is_within(root_path, anchor):
        raise PathEscapeError(
            f"path escapes storage root: {resolved}",
            path=raw,
            operation=f"resolve_{kind.value}",
        )
    return resolved


def relative_to_root(root: str | Path, path: str | Path) -> str:
    """Express `path` relative to `root` with `/` separators."""
    rel = os.path.relpath(str(path), str(root))
    return PurePath(rel).as_posix()
