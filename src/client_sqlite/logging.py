from __future__ import annotations

import logging
import sys
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# Level names accepted from config. Includes the severities stored in the
# logs table (trace, warn) alongside the stdlib names.
_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,  # stdlib has no TRACE
}


def configure_logging(log_level: str = "info") -> None:
    """
    Configures root logging for the service:
    - a single stdout handler (previous stream handlers are replaced)
    - one format for every logger, uvicorn's included
    """
    level = parse_level(log_level)

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler):
            root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(max(level, logging.INFO))
    logging.getLogger("uvicorn.error").setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name if name else "client_sqlite")


def parse_level(log_level: str) -> int:
    return _LEVELS.get(log_level.lower().strip(), logging.INFO)
