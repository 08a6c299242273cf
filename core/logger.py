"""Logging helpers for the inference engine.

`get_logger` hands out loggers sharing one stream handler and one rotating
file handler (`app.log` under `BIO_LOG_DIR`). The level comes from
`BIO_LOG_LEVEL`. Logging must never take the engine down, so a log directory
that cannot be created leaves only the stream handler in place.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import List

LOG_DIR = os.getenv("BIO_LOG_DIR", os.path.join(os.path.dirname(__file__), "..", "logs"))
LOG_FILE = os.path.join(LOG_DIR, "app.log")
LOG_LEVEL = os.getenv("BIO_LOG_LEVEL", "INFO").upper()

_formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
_handlers: List[logging.Handler] = []


def _shared_handlers() -> List[logging.Handler]:
    if _handlers:
        return _handlers
    stream = logging.StreamHandler()
    stream.setFormatter(_formatter)
    _handlers.append(stream)
    try:
        os.makedirs(LOG_DIR, exist_ok=True)
        file_handler = RotatingFileHandler(LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3)
    except OSError as exc:
        logging.getLogger(__name__).warning("File logging disabled, cannot write %s: %s", LOG_FILE, exc)
    else:
        file_handler.setFormatter(_formatter)
        _handlers.append(file_handler)
    return _handlers


def resolve_level(name: str) -> int:
    """Map a level name such as 'debug' to its number; unknown names mean INFO."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str = __name__, level: int = None) -> logging.Logger:
    """Return a logger wired to the shared handlers.

    Calling it repeatedly for the same name never stacks duplicate handlers.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(level if level is not None else resolve_level(LOG_LEVEL))
        for handler in _shared_handlers():
            logger.addHandler(handler)
    return logger
