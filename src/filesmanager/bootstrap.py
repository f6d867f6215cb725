"""Bootstrap - initialize the Files Manager storage.

Picks the storage root once and builds the storage engine around it.
The engine is handed to the API layer; nothing else holds the root.
"""

from typing import Optional

import structlog

from filesmanager.config import Settings, settings
from filesmanager.infrastructure.storage.root_locator import locate_storage_root
from filesmanager.infrastructure.storage.storage_engine import FileSystemStorage

logger = structlog.get_logger()


def bootstrap(config: Optional[Settings] = None) -> FileSystemStorage:
    """Initialize logging and storage.

    Raises BootstrapFailure when no storage root can be created; the
    caller must not start serving requests in that case.
    """
    config = config or settings
    config.setup_logging()
    logger.info("bootstrapping_filesmanager", configured=config.storage_location or "")

    root = locate_storage_root(config.storage_location)
    storage = FileSystemStorage(
        root,
        guard_symlinks=config.guard_symlinks,
        fsync_writes=config.fsync_writes,
    )

    logger.info("bootstrap_complete", root=str(storage.root))
    return storage


if __name__ == "__main__":
    bootstrap()
