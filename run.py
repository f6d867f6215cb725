#!/usr/bin/env python
"""Simple entry point to run the Files Manager server."""

import uvicorn

from filesmanager.config import settings

if __name__ == "__main__":
    settings.setup_logging()
    uvicorn.run(
        "filesmanager.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
