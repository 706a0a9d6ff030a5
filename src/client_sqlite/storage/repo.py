# src/client_sqlite/storage/repo.py
from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from client_sqlite.domain.levels import LogLevel, require_log_level
from client_sqlite.domain.models import LogEntry, LogsQueryInput, LogsStoreInput
from client_sqlite.logging import get_logger

from .db import last_insert_rowid, run_query, run_statement
from .query import build_log_query
from .schema import ensure_logs_table

_LOG = get_logger(__name__)

_INSERT_LOG = """
INSERT INTO logs (level, message, data, session_id, command, context, error_stack)
VALUES (?, ?, ?, ?, ?, ?, ?);
"""


def encode_data(data: Optional[Mapping[str, Any]]) -> Optional[str]:
    # None -> NULL; an empty mapping is still stored as "{}".
    if data is None:
        return None
    return json.dumps(data, separators=(",", ":"))


def decode_data(raw: Optional[str]) -> Any:
    # NULL and "" (rows written outside logs.store) both read back as null.
    if not raw:
        return None
    return json.loads(raw)


@dataclass
class LogRepo:
    """
    SQL access for the logs table, bound to one connection.

    The insert and the last_insert_rowid() read share that connection, so
    the returned id is this call's own row even with concurrent writers.
    """
    conn: sqlite3.Connection

    def ensure_table(self) -> None:
        ensure_logs_table(self.conn)

    def store(self, entry: LogsStoreInput) -> int:
        level = require_log_level(entry.level)

        run_statement(
            self.conn,
            _INSERT_LOG,
            (
                level.value,
                entry.message,
                encode_data(entry.data),
                entry.session_id,
                entry.command,
                entry.context,
                entry.error_stack,
            ),
        )
        log_id = last_insert_rowid(self.conn)
        _LOG.debug("Stored log %d (level=%s)", log_id, level)
        return log_id

    def query(self, filters: LogsQueryInput) -> list[LogEntry]:
        sql, params = build_log_query(
            session_id=filters.session_id,
            command=filters.command,
            levels=filters.level,
            order=filters.order_by,
            limit=filters.limit,
            offset=filters.offset,
        ).to_sql()

        result = run_query(self.conn, sql, params)
        return [self._row_to_entry(row) for row in result.rows]

    def count(self) -> int:
        return int(self.conn.execute("SELECT COUNT(*) AS c FROM logs;").fetchone()["c"])

    @staticmethod
    def _row_to_entry(row: Mapping[str, Any]) -> LogEntry:
        return LogEntry(
            id=row["id"],
            timestamp=row["timestamp"],
            level=LogLevel(row["level"]),
            message=row["message"],
            data=decode_data(row["data"]),
            session_id=row["session_id"],
            command=row["command"],
            context=row["context"],
            error_stack=row["error_stack"],
            created_at=row["created_at"],
        )
