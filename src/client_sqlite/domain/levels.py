# src/client_sqlite/domain/levels.py
from __future__ import annotations

from enum import StrEnum

from client_sqlite.config import LOG_LEVELS

from .errors import InvalidLogLevelError


class LogLevel(StrEnum):
    """
    Severity stored in logs.level.

    Values match LOG_LEVELS (and therefore the table's CHECK constraint).
    """

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


def is_log_level(value: object) -> bool:
    return isinstance(value, str) and value in LOG_LEVELS


def require_log_level(value: object) -> LogLevel:
    """
    Returns `value` as a LogLevel or raises InvalidLogLevelError.
    """
    if not is_log_level(value):
        raise InvalidLogLevelError(
            f"Invalid log level: {value}",
            details={"level": repr(value), "allowed": list(LOG_LEVELS)},
        )
    return LogLevel(value)
