"""Process-wide logging bootstrap."""

from __future__ import annotations

import logging
from typing import Any

import structlog


_LOG_CONFIGURED = False


def _build_processors(json_logs: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_logs:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(level: str = "INFO", json_logs: bool = False, *, force: bool = False) -> None:
    """Configure stdlib logging and structlog once per process.

    `force` re-applies the configuration, e.g. after settings changed.
    """
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED and not force:
        return

    log_level = getattr(logging, str(level or "INFO").upper(), logging.INFO)

    # uvicorn and fastapi log through stdlib logging.
    logging.basicConfig(level=log_level, format="%(message)s", force=force)

    structlog.configure(
        processors=_build_processors(json_logs),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _LOG_CONFIGURED = True
