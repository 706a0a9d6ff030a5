from __future__ import annotations

import base64
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from .levels import LogLevel, SortOrder, is_log_level

# Positional bind values accepted by db.query / db.execute.
SqlParam = Union[None, bool, int, float, str]


def _check_level(value: Any) -> Any:
    if not is_log_level(value):
        raise PydanticCustomError(
            "invalid_log_level",
            "Invalid log level: {level}",
            {"level": repr(value)},
        )
    return value


def _as_level_list(value: Any) -> Any:
    # A single level is a one-element membership set.
    if value is None or isinstance(value, list):
        return value
    return [value]


def _blob_to_text(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value


Level = Annotated[LogLevel, BeforeValidator(_check_level)]
NonNegativeInt = Annotated[int, Field(ge=0)]


class RpcModel(BaseModel):
    """
    Base for procedure inputs/outputs.

    Public field names are camelCase (sessionId, dbPath, ...); snake_case
    attribute names are accepted on input too.
    """
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DbQueryInput(RpcModel):
    sql: Annotated[str, Field(min_length=1)]
    params: list[SqlParam] = Field(default_factory=list)
    db_path: Optional[str] = None


class DbQueryOutput(RpcModel):
    columns: list[str]
    rows: list[dict[str, Any]]

    @field_serializer("rows", when_used="json")
    def serialize_rows(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        # BLOB values are bytes; JSON carries them base64-encoded.
        return [{k: _blob_to_text(v) for k, v in row.items()} for row in rows]


class DbExecuteInput(DbQueryInput):
    pass


class DbExecuteOutput(RpcModel):
    changes: int


class LogsStoreInput(RpcModel):
    level: Level
    message: str
    session_id: Optional[str] = None
    command: Optional[str] = None
    context: Optional[str] = None
    # Absent (or null) is stored as NULL; {} is stored as "{}".
    data: Optional[dict[str, Any]] = None
    error_stack: Optional[str] = None
    db_path: Optional[str] = None


class LogsStoreOutput(RpcModel):
    id: int


class LogsQueryInput(RpcModel):
    session_id: Optional[str] = None
    command: Optional[str] = None
    level: Annotated[Optional[list[Level]], BeforeValidator(_as_level_list)] = None
    limit: Optional[NonNegativeInt] = None
    offset: Optional[NonNegativeInt] = None
    order_by: SortOrder = SortOrder.DESC
    db_path: Optional[str] = None


class LogEntry(RpcModel):
    id: int
    timestamp: str
    level: LogLevel
    message: str
    # A mapping for rows written by logs.store; rows written directly may hold any JSON value.
    data: Any = None
    session_id: Optional[str] = None
    command: Optional[str] = None
    context: Optional[str] = None
    error_stack: Optional[str] = None
    created_at: str


class LogsQueryOutput(RpcModel):
    logs: list[LogEntry]


class ProcedureInfo(RpcModel):
    path: str
    description: str


class ProcedureListResponse(RpcModel):
    procedures: list[ProcedureInfo]


class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    error: str
    code: str
    details: dict = Field(default_factory=dict)
