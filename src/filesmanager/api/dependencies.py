"""FastAPI dependencies."""

from typing import AsyncGenerator

from fastapi import Request

from filesmanager.infrastructure.storage.storage_engine import FileSystemStorage


async def get_storage(request: Request) -> AsyncGenerator[FileSystemStorage, None]:
    """Dependency for the storage engine built at startup."""
    yield request.app.state.storage
