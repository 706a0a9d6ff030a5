# src/client_sqlite/storage/schema.py
from __future__ import annotations

import sqlite3

from client_sqlite.config import LOG_LEVELS

from .migrations import Migration, apply_migrations

_LEVEL_CHECK = ", ".join(f"'{level}'" for level in LOG_LEVELS)

LOG_MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version=1,
        description="Create logs table",
        up=f"""
        CREATE TABLE IF NOT EXISTS logs (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          timestamp TEXT NOT NULL DEFAULT (datetime('now')),
          level TEXT NOT NULL CHECK (level IN ({_LEVEL_CHECK})),
          message TEXT NOT NULL,
          data TEXT,
          session_id TEXT,
          command TEXT,
          context TEXT,
          error_stack TEXT,
          created_at TEXT NOT NULL DEFAULT (datetime('now'))
        );
        CREATE INDEX IF NOT EXISTS idx_logs_session ON logs(session_id);
        CREATE INDEX IF NOT EXISTS idx_logs_level ON logs(level);
        CREATE INDEX IF NOT EXISTS idx_logs_timestamp ON logs(timestamp);
        CREATE INDEX IF NOT EXISTS idx_logs_command ON logs(command);
        """,
        down="DROP TABLE IF EXISTS logs;",
    ),
)


def ensure_logs_table(conn: sqlite3.Connection) -> None:
    """
    Makes sure the logs table (and its indexes) exist. Cheap to call before
    every log operation; safe when several callers race on a fresh file.
    """
    if not apply_migrations(conn, LOG_MIGRATIONS):
        # Already recorded as applied, but the table may have been dropped since.
        for m in LOG_MIGRATIONS:
            conn.executescript(m.up)
