"""Files router - upload, listing, download and deletion endpoints.

Nested target directories in `targetPath` and in the create-directory path
use the configured separator token (`_` by default), e.g.
`2025_Janvier_Factures` stands for `2025/Janvier/Factures`.
"""

import mimetypes
from datetime import datetime
from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from pydantic import BaseModel

from filesmanager.api.dependencies import get_storage
from filesmanager.config import settings
from filesmanager.infrastructure.storage.storage_engine import FileSystemStorage

router = APIRouter(prefix="/files", tags=["Files API"])

ERROR_400_PATH = {
    "description": "Path is invalid or escapes the storage root.",
    "content": {
        "application/json": {
            "example": {
                "detail": "path escapes storage root: /srv/outside.txt",
                "error": "path_escape",
                "path": "../outside.txt",
            }
        }
    },
}
ERROR_404_FILE = {
    "description": "File was not found.",
    "content": {
        "application/json": {
            "example": {
                "detail": "file not found",
                "error": "not_found",
                "path": "2025/missing.pdf",
            }
        }
    },
}
ERROR_500_STORAGE = {
    "description": "Underlying filesystem operation failed.",
    "content": {
        "application/json": {
            "example": {
                "detail": "[Errno 28] No space left on device",
                "error": "storage_io",
                "path": "2025/report.pdf",
            }
        }
    },
}


def translate_separator(raw: str, token: str) -> str:
    """Turn a token-separated path (`2025_Janvier`) into `2025/Janvier`."""
    value = (raw or "").strip()
    if not value or not token:
        return value
    return value.replace(token, "/")


def build_upload_path(target_path: str, filename: str, token: str) -> str:
    target = translate_separator(target_path, token).strip("/")
    if not target:
        return filename
    return f"{target}/{filename}"


class MessageResponse(BaseModel):
    """Outcome of a mutating operation."""

    message: str
    path: str


class FileEntryResponse(BaseModel):
    """One entry of the stored tree."""

    path: str
    kind: str
    size: int
    modified_at: datetime


@router.post(
    "/upload",
    response_model=MessageResponse,
    summary="Upload a file",
    responses={400: ERROR_400_PATH, 500: ERROR_500_STORAGE},
)
async def upload_file(
    file: UploadFile = File(..., description="File to upload"),
    target_path: str = Form(
        "",
        alias="targetPath",
        description="Optional target directory using '_' as separator, e.g. '2025_Janvier_Factures'",
    ),
    storage: FileSystemStorage = Depends(get_storage),
) -> MessageResponse:
    """Store an uploaded file, optionally inside a nested target directory."""
    filename = (file.filename or "").strip()
    if not filename:
        raise HTTPException(status_code=400, detail="Uploaded file has no name")

    path = build_upload_path(target_path, filename, settings.path_separator)
    content = await file.read()
    await run_in_threadpool(storage.store_file, path, content)
    return MessageResponse(message=f"File uploaded successfully: {path}", path=path)


@router.get("/list", response_model=List[str], summary="List stored files")
def list_files(storage: FileSystemStorage = Depends(get_storage)) -> List[str]:
    """List every stored file and directory, relative to the storage root."""
    return storage.list_files()


@router.get("/entries", response_model=List[FileEntryResponse], summary="List stored entries")
def list_entries(storage: FileSystemStorage = Depends(get_storage)) -> List[FileEntryResponse]:
    """List stored files and directories with their size and modification time."""
    return [FileEntryResponse(**entry.to_dict()) for entry in storage.list_entries()]


@router.get(
    "/download/{file_path:path}",
    summary="Download a file",
    responses={400: ERROR_400_PATH, 404: ERROR_404_FILE},
)
def download_file(
    file_path: str,
    storage: FileSystemStorage = Depends(get_storage),
) -> Response:
    content = storage.read_file(file_path)
    media_type, _ = mimetypes.guess_type(file_path)
    filename = file_path.rsplit("/", 1)[-1]
    return Response(
        content=content,
        media_type=media_type or "application/octet-stream",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@router.delete(
    "/directory/{directory_path:path}",
    response_model=MessageResponse,
    summary="Delete a directory",
    responses={400: ERROR_400_PATH, 500: ERROR_500_STORAGE},
)
def delete_directory(
    directory_path: str,
    storage: FileSystemStorage = Depends(get_storage),
) -> MessageResponse:
    """Delete a directory and all of its content. Missing directories are ignored."""
    storage.delete_directory(directory_path)
    return MessageResponse(
        message=f"Directory deleted successfully: {directory_path}",
        path=directory_path,
    )


@router.post(
    "/directory/{directory_path:path}",
    response_model=MessageResponse,
    summary="Create a directory",
    responses={400: ERROR_400_PATH, 500: ERROR_500_STORAGE},
)
def create_directory(
    directory_path: str,
    storage: FileSystemStorage = Depends(get_storage),
) -> MessageResponse:
    """Create a directory; '2025_Janvier' creates Janvier inside 2025."""
    path = translate_separator(directory_path, settings.path_separator)
    storage.create_directory(path)
    return MessageResponse(message=f"Directory created successfully: {path}", path=path)


@router.delete(
    "/file/{file_path:path}",
    response_model=MessageResponse,
    summary="Delete a file",
    responses={400: ERROR_400_PATH, 500: ERROR_500_STORAGE},
)
def delete_file(
    file_path: str,
    storage: FileSystemStorage = Depends(get_storage),
) -> MessageResponse:
    """Delete a file. Deleting a missing file succeeds."""
    storage.delete_file(file_path)
    return MessageResponse(message=f"File deleted successfully: {file_path}", path=file_path)
