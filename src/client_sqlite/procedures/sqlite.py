# src/client_sqlite/procedures/sqlite.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from client_sqlite.config import resolve_db_path
from client_sqlite.domain.levels import require_log_level
from client_sqlite.domain.models import (
    DbExecuteInput,
    DbExecuteOutput,
    DbQueryInput,
    DbQueryOutput,
    LogsQueryInput,
    LogsQueryOutput,
    LogsStoreInput,
    LogsStoreOutput,
)
from client_sqlite.logging import get_logger
from client_sqlite.storage import LogRepo, SQLiteDB, run_query, run_statement, with_connection

from .registry import Procedure, ProcedureRegistry

_LOG = get_logger(__name__)


class SqliteProcedures:
    """
    Handlers for db.query, db.execute, logs.store and logs.query.

    Every call opens its own connection (at `dbPath`, or the default path)
    and closes it before returning. Log handlers make sure the logs table
    exists first.
    """

    def __init__(self, default_db_path: Optional[Path] = None, timeout_s: float = 5.0) -> None:
        self._default_db_path = default_db_path
        self._timeout_s = timeout_s

    def _db(self, db_path: Optional[str]) -> SQLiteDB:
        return SQLiteDB(resolve_db_path(db_path, self._default_db_path), timeout_s=self._timeout_s)

    async def db_query(self, params: DbQueryInput) -> DbQueryOutput:
        db = self._db(params.db_path)
        result = await with_connection(db, lambda conn: run_query(conn, params.sql, params.params))
        _LOG.debug("db.query on %s returned %d row(s)", db.db_path, len(result.rows))
        return DbQueryOutput(columns=result.columns, rows=result.rows)

    async def db_execute(self, params: DbExecuteInput) -> DbExecuteOutput:
        db = self._db(params.db_path)
        changes = await with_connection(db, lambda conn: run_statement(conn, params.sql, params.params))
        _LOG.debug("db.execute on %s changed %d row(s)", db.db_path, changes)
        return DbExecuteOutput(changes=changes)

    async def logs_store(self, params: LogsStoreInput) -> LogsStoreOutput:
        # Reject before touching the database.
        require_log_level(params.level)

        db = self._db(params.db_path)
        await with_connection(db, lambda conn: LogRepo(conn).ensure_table())
        log_id = await with_connection(db, lambda conn: LogRepo(conn).store(params))
        return LogsStoreOutput(id=log_id)

    async def logs_query(self, params: LogsQueryInput) -> LogsQueryOutput:
        db = self._db(params.db_path)
        await with_connection(db, lambda conn: LogRepo(conn).ensure_table())
        logs = await with_connection(db, lambda conn: LogRepo(conn).query(params))
        return LogsQueryOutput(logs=logs)

    def procedures(self) -> list[Procedure]:
        return [
            Procedure(
                path=("db", "query"),
                input_model=DbQueryInput,
                output_model=DbQueryOutput,
                description="Execute a SQL SELECT query",
                handler=self.db_query,
            ),
            Procedure(
                path=("db", "execute"),
                input_model=DbExecuteInput,
                output_model=DbExecuteOutput,
                description="Execute a SQL statement (INSERT, UPDATE, DELETE)",
                handler=self.db_execute,
            ),
            Procedure(
                path=("logs", "store"),
                input_model=LogsStoreInput,
                output_model=LogsStoreOutput,
                description="Store a log entry in the database",
                handler=self.logs_store,
            ),
            Procedure(
                path=("logs", "query"),
                input_model=LogsQueryInput,
                output_model=LogsQueryOutput,
                description="Query log entries from the database",
                handler=self.logs_query,
            ),
        ]


def register_sqlite_procedures(
    registry: ProcedureRegistry,
    *,
    default_db_path: Optional[Path] = None,
    timeout_s: float = 5.0,
) -> list[Procedure]:
    """
    Registers the four SQLite procedures on `registry`.

    Call once during service startup; a second call on the same registry
    raises DuplicateProcedureError.
    """
    procedures = SqliteProcedures(default_db_path=default_db_path, timeout_s=timeout_s).procedures()
    registry.register_many(procedures)
    _LOG.info("Registered %d SQLite procedure(s)", len(procedures))
    return procedures
