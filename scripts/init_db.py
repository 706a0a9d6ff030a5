#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from client_sqlite.config import load_settings, resolve_db_path
from client_sqlite.logging import configure_logging, get_logger
from client_sqlite.storage import LOG_MIGRATIONS, SQLiteDB, apply_migrations, connection, revert_migrations


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create (or drop) the logs table in a SQLite database.")
    parser.add_argument("--db-path", help="database file (default: CLIENT_SQLITE_DB_PATH or ~/logs/cli/cli.db)")
    parser.add_argument("--revert", action="store_true", help="run the down migrations instead")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings.log_level)
    log = get_logger(__name__)

    db = SQLiteDB(resolve_db_path(args.db_path, settings.db_path), timeout_s=settings.timeout_s)
    with connection(db) as conn:
        if args.revert:
            versions = revert_migrations(conn, LOG_MIGRATIONS)
            log.info("Reverted %s on %s", versions or "nothing", db.db_path)
        else:
            versions = apply_migrations(conn, LOG_MIGRATIONS)
            log.info("Applied %s on %s", versions or "nothing", db.db_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
