"""Storage infrastructure for Files Manager.

Path resolution, root discovery and the filesystem storage engine.
"""

from .path_guard import (
    PathKind,
    is_within,
    normalize_root,
    relative_to_root,
    resolve_path,
)
from .root_locator import (
    is_location_usable,
    locate_storage_root,
    user_data_dir,
)
from .storage_engine import FileSystemStorage

__all__ = [
    # Path guard
    "PathKind",
    "is_within",
    "normalize_root",
    "relative_to_root",
    "resolve_path",
    # Root locator
    "is_location_usable",
    "locate_storage_root",
    "user_data_dir",
    # Engine
    "FileSystemStorage",
]
