"""Logging configuration for the storefront.

stdlib logging owns the handlers (stdout, plus rotating files outside tests);
structlog renders key/value events through it. Request handlers bind a
request id with ``add_context`` so every event of a request carries it.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

from shared.config import get_env

_DEFAULT_LEVELS = {"production": "INFO", "development": "DEBUG", "test": "WARNING"}

# Chatty third-party loggers kept at WARNING
_QUIET_LOGGERS = ("pymongo", "stripe", "asyncio", "fontTools")

_MAX_LOG_BYTES = 10 * 1024 * 1024


def _rotating_file(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=_MAX_LOG_BYTES, backupCount=5, encoding="utf-8")
    handler.setLevel(level)
    return handler


def _renderer(env: str):
    if env == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=5),
    )


def configure_logging(log_dir: str | None = None, log_file_prefix: str = "storefront") -> None:
    """Configure stdlib handlers and structlog for the current environment.

    LOG_LEVEL overrides the per-environment default; LOG_DIR the file location.
    """
    env = get_env()
    level = os.getenv("LOG_LEVEL", _DEFAULT_LEVELS.get(env, "INFO"))

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if env != "test":
        directory = Path(log_dir or os.getenv("LOG_DIR", "logs"))
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating_file(directory / f"{log_file_prefix}.log", level))
        handlers.append(_rotating_file(directory / f"{log_file_prefix}_error.log", logging.ERROR))

    logging.basicConfig(level=level, handlers=handlers, format="%(message)s", force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info if env == "production" else structlog.processors.StackInfoRenderer(),
            _renderer(env),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def add_context(**kwargs: Any) -> None:
    """Bind key/values onto every later event in the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
