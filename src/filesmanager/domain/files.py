"""File listing models."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict

FILE = "file"
DIRECTORY = "directory"
SYMLINK = "symlink"


@dataclass(frozen=True)
class FileEntry:
    """One node of the stored tree, relative to the storage root."""

    path: str
    kind: str
    size: int
    modified_at: datetime

    @property
    def is_directory(self) -> bool:
        return self.kind == DIRECTORY

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["modified_at"] = self.modified_at.isoformat()
        return data
