# src/client_sqlite/storage/db.py
from __future__ import annotations

import asyncio
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SQLiteDB:
    """
    SQLite connection factory.

    Notes:
    - One connection per unit of work; connections are never shared across calls.
    - Pragmas are applied on each connection.
    - WAL mode lets concurrent readers proceed while a log row is being written.
    """
    db_path: Path
    timeout_s: float = 5.0

    def connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            str(self.db_path),
            timeout=self.timeout_s,
            isolation_level=None,          # autocommit; each statement is its own transaction
            check_same_thread=True,
        )
        conn.row_factory = sqlite3.Row
        self._apply_pragmas(conn)
        return conn

    def _apply_pragmas(self, conn: sqlite3.Connection) -> None:
        cur = conn.cursor()
        cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute("PRAGMA foreign_keys=ON;")
        cur.execute(f"PRAGMA busy_timeout={int(self.timeout_s * 1000)};")
        cur.execute("PRAGMA synchronous=NORMAL;")
        cur.close()


@dataclass(frozen=True)
class QueryResult:
    columns: list[str]
    rows: list[dict[str, Any]]


@contextmanager
def connection(db: SQLiteDB) -> Iterator[sqlite3.Connection]:
    """
    Opens a connection and closes it on every exit path.
    """
    conn = db.connect()
    try:
        yield conn
    finally:
        conn.close()


async def with_connection(db: SQLiteDB, fn: Callable[[sqlite3.Connection], T]) -> T:
    """
    Runs `fn(conn)` on a fresh connection in a worker thread and returns its result.

    The connection is opened, used and closed inside that one thread, so the
    event loop only suspends here. Exceptions raised by `fn` (including
    sqlite3.Error) propagate unchanged after the connection is closed.
    """

    def _run() -> T:
        with connection(db) as conn:
            return fn(conn)

    return await asyncio.to_thread(_run)


def run_query(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> QueryResult:
    cur = conn.execute(sql, tuple(params))
    try:
        columns = [d[0] for d in cur.description or ()]
        rows = [dict(zip(columns, row)) for row in cur.fetchall()]
    finally:
        cur.close()
    return QueryResult(columns=columns, rows=rows)


def run_statement(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> int:
    """
    Executes a statement and returns the number of rows it changed.
    Statements that change no rows (DDL, SELECT) report 0.
    """
    cur = conn.execute(sql, tuple(params))
    try:
        return max(cur.rowcount, 0)
    finally:
        cur.close()


def last_insert_rowid(conn: sqlite3.Connection) -> int:
    """
    Rowid of the most recent successful INSERT on *this* connection.
    """
    return int(conn.execute("SELECT last_insert_rowid();").fetchone()[0])
