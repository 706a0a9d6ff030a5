"""
Domain layer for client-sqlite.

- levels: LogLevel / SortOrder enums
- models: Pydantic input/output shapes for the procedures
- errors: package-level exceptions
"""

from .levels import LogLevel, SortOrder
from .models import (
    DbExecuteInput,
    DbExecuteOutput,
    DbQueryInput,
    DbQueryOutput,
    ErrorResponse,
    LogEntry,
    LogsQueryInput,
    LogsQueryOutput,
    LogsStoreInput,
    LogsStoreOutput,
    ProcedureInfo,
    ProcedureListResponse,
)
from .errors import (
    ClientSqliteError,
    DuplicateProcedureError,
    InputValidationError,
    InvalidLogLevelError,
    ProcedureNotFoundError,
)

__all__ = [
    "LogLevel",
    "SortOrder",
    "DbQueryInput",
    "DbQueryOutput",
    "DbExecuteInput",
    "DbExecuteOutput",
    "LogsStoreInput",
    "LogsStoreOutput",
    "LogsQueryInput",
    "LogsQueryOutput",
    "LogEntry",
    "ProcedureInfo",
    "ProcedureListResponse",
    "ErrorResponse",
    "ClientSqliteError",
    "InputValidationError",
    "InvalidLogLevelError",
    "ProcedureNotFoundError",
    "DuplicateProcedureError",
]
