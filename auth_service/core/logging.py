"""
Logging utilities: JSON structured logging with contextual fields.

- Configures the root logger to emit JSON using python-json-logger.
- Provides a helper to bind contextual fields (request_id, path, ...) to a logger.
"""
from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator

from pythonjsonlogger.json import JsonFormatter

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Route uvicorn's own records through the root JSON handler
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True


@contextmanager
def bind_context(logger: logging.Logger, **kwargs: Any) -> Iterator[logging.LoggerAdapter]:
    """Yield a logger adapter that adds the given fields to every record.

    Usage:
        with bind_context(logger, request_id=...) as log:
            log.info("message")
    """
    yield logging.LoggerAdapter(logger, extra=kwargs)
