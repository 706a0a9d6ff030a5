# src/client_sqlite/storage/__init__.py
"""
Storage layer for client-sqlite (SQLite).

- db: connection factory, scoped connections, query/statement helpers
- migrations: in-code migration runner
- schema: the logs table migration + ensure guard
- query: log filter / pagination assembly
- repo: logs table data access
"""

from .db import (
    QueryResult,
    SQLiteDB,
    connection,
    last_insert_rowid,
    run_query,
    run_statement,
    with_connection,
)
from .migrations import Migration, apply_migrations, current_version, revert_migrations
from .query import LogQuery, Predicate, build_log_query
from .repo import LogRepo
from .schema import LOG_MIGRATIONS, ensure_logs_table

__all__ = [
    "SQLiteDB",
    "QueryResult",
    "connection",
    "with_connection",
    "run_query",
    "run_statement",
    "last_insert_rowid",
    "Migration",
    "apply_migrations",
    "revert_migrations",
    "current_version",
    "LOG_MIGRATIONS",
    "ensure_logs_table",
    "LogQuery",
    "Predicate",
    "build_log_query",
    "LogRepo",
]
