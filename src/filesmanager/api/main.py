"""FastAPI main application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from filesmanager import __version__
from filesmanager.api.routers import files
from filesmanager.bootstrap import bootstrap
from filesmanager.config import settings
from filesmanager.domain.errors import (
    FilesManagerError,
    NotFoundError,
    PathEscapeError,
    StorageIOError,
)

logger = structlog.get_logger()

# Most specific first; anything else is a server-side failure.
_ERROR_STATUS = (
    (PathEscapeError, 400, "path_escape"),
    (NotFoundError, 404, "not_found"),
    (StorageIOError, 500, "storage_io"),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    settings.setup_logging()
    logger.info(
        "filesmanager_startup",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
    app.state.storage = bootstrap(settings)
    yield
    # Shutdown
    logger.info("filesmanager_shutdown")


app = FastAPI(
    title="Files Manager API",
    description="API for managing files and directories under a single storage root",
    version=__version__,
    contact={"name": "Files Manager Team", "email": "contact@filesmanager.com"},
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return concise request validation details."""
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Request validation failed",
            "errors": [
                {
                    "field": " -> ".join(str(part) for part in err.get("loc", [])),
                    "type": err.get("type", "unknown"),
                    "msg": err.get("msg", "validation error"),
                }
                for err in exc.errors()
            ],
        },
    )


@app.exception_handler(FilesManagerError)
async def storage_exception_handler(request: Request, exc: FilesManagerError):
    """Map storage error kinds to status codes."""
    status_code, kind = 500, "storage_error"
    for error_type, code, name in _ERROR_STATUS:
        if isinstance(exc, error_type):
            status_code, kind = code, name
            break
    logger.info(
        "request_failed",
        method=request.method,
        url=str(request.url.path),
        status=status_code,
        error=kind,
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.reason, "error": kind, "path": exc.path},
    )


# Routers
app.include_router(files.router, prefix="/api")


@app.get("/health")
async def health(request: Request):
    """Health check endpoint."""
    return {"status": "ok", "root": str(request.app.state.storage.root)}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Files Manager",
        "version": __version__,
        "description": "API for managing files and directories under a single storage root",
    }
