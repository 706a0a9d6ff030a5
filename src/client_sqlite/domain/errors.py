# src/client_sqlite/domain/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ClientSqliteError(Exception):
    """
    Base error for everything this package raises itself.

    Storage-engine failures are not wrapped: handlers let sqlite3.Error
    propagate as-is, and only the HTTP layer renders them.
    """
    message: str
    code: str = "CLIENT_SQLITE_ERROR"
    details: Optional[dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class InputValidationError(ClientSqliteError):
    code: str = "VALIDATION_ERROR"


@dataclass
class InvalidLogLevelError(InputValidationError):
    code: str = "INVALID_LOG_LEVEL"


@dataclass
class ProcedureNotFoundError(ClientSqliteError):
    code: str = "NOT_FOUND"


@dataclass
class DuplicateProcedureError(ClientSqliteError):
    code: str = "CONFLICT"
