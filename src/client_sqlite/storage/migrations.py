# src/client_sqlite/storage/migrations.py
from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Iterable, Optional

from client_sqlite.logging import get_logger

_LOG = get_logger(__name__)


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    up: str
    down: str

    def __post_init__(self) -> None:
        if self.version <= 0:
            raise ValueError(f"Migration version must be > 0, got {self.version}")


def apply_migrations(conn: sqlite3.Connection, migrations: Iterable[Migration]) -> list[int]:
    """
    Applies in-code migrations in ascending version order.

    Applied versions are recorded in schema_migrations. Each `up` script
    should be idempotent (CREATE ... IF NOT EXISTS): two processes may race
    to apply the same version, and the bookkeeping insert tolerates the
    loser via INSERT OR IGNORE.

    Returns the versions applied by this call.
    """
    ordered = _sorted_unique(migrations)
    _ensure_migrations_table(conn)

    applied = _get_applied_versions(conn)
    to_apply = [m for m in ordered if m.version not in applied]
    if not to_apply:
        _LOG.debug("No pending migrations.")
        return []

    for m in to_apply:
        _LOG.info("Applying migration %03d (%s)", m.version, m.description)
        conn.executescript(m.up)
        conn.execute(
            "INSERT OR IGNORE INTO schema_migrations(version, description, applied_at) "
            "VALUES (?, ?, strftime('%s','now')*1000);",
            (m.version, m.description),
        )
    return [m.version for m in to_apply]


def revert_migrations(
    conn: sqlite3.Connection,
    migrations: Iterable[Migration],
    target_version: int = 0,
) -> list[int]:
    """
    Runs `down` scripts for every applied version above `target_version`,
    newest first. Returns the versions reverted.
    """
    ordered = _sorted_unique(migrations)
    _ensure_migrations_table(conn)

    applied = _get_applied_versions(conn)
    to_revert = [m for m in reversed(ordered) if m.version in applied and m.version > target_version]

    for m in to_revert:
        _LOG.info("Reverting migration %03d (%s)", m.version, m.description)
        conn.executescript(m.down)
        conn.execute("DELETE FROM schema_migrations WHERE version = ?;", (m.version,))
    return [m.version for m in to_revert]


def current_version(conn: sqlite3.Connection) -> Optional[int]:
    _ensure_migrations_table(conn)
    row = conn.execute("SELECT MAX(version) AS v FROM schema_migrations;").fetchone()
    return None if row["v"] is None else int(row["v"])


def _ensure_migrations_table(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations(
          version INTEGER PRIMARY KEY,
          description TEXT NOT NULL,
          applied_at INTEGER NOT NULL
        );
        """
    )


def _get_applied_versions(conn: sqlite3.Connection) -> set[int]:
    rows = conn.execute("SELECT version FROM schema_migrations ORDER BY version;").fetchall()
    return {int(r["version"]) for r in rows}


def _sorted_unique(migrations: Iterable[Migration]) -> list[Migration]:
    ordered = sorted(migrations, key=lambda m: m.version)
    versions = [m.version for m in ordered]
    if len(versions) != len(set(versions)):
        raise ValueError(f"Duplicate migration versions: {versions}")
    return ordered
