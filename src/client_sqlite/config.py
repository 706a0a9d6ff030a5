from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

# Accepted log severities, in increasing order. The logs migration derives
# its CHECK constraint from this tuple.
LOG_LEVELS: tuple[str, ...] = ("trace", "debug", "info", "warn", "error")


def default_db_path() -> Path:
    """
    Default location of the CLI log database: ~/logs/cli/cli.db
    """
    return Path.home() / "logs" / "cli" / "cli.db"


def resolve_db_path(db_path: Optional[Union[str, Path]], default: Optional[Path] = None) -> Path:
    """
    Per-call path wins; otherwise fall back to `default`, then to default_db_path().
    """
    if db_path is not None and str(db_path) != "":
        return Path(db_path).expanduser()
    return default if default is not None else default_db_path()


def _get_env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"Environment variable {name} must be an int, got: {raw!r}") from e
    return value


def _get_env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw


@dataclass(frozen=True)
class Settings:
    # Database used when a procedure call carries no dbPath
    db_path: Path
    timeout_ms: int

    # Server (used by client_sqlite.main when starting uvicorn)
    host: str
    port: int
    log_level: str

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0


def load_settings() -> Settings:
    """
    Loads settings from env vars with sane defaults.

    Env vars:
      - CLIENT_SQLITE_DB_PATH (default: ~/logs/cli/cli.db)
      - CLIENT_SQLITE_TIMEOUT_MS (default: 5000)
      - CLIENT_SQLITE_HOST (default: 127.0.0.1)
      - CLIENT_SQLITE_PORT (default: 8000)
      - CLIENT_SQLITE_LOG_LEVEL (default: info)
    """
    db_path = Path(_get_env_str("CLIENT_SQLITE_DB_PATH", str(default_db_path()))).expanduser()

    timeout_ms = _get_env_int("CLIENT_SQLITE_TIMEOUT_MS", 5_000)
    if timeout_ms <= 0:
        raise ValueError("CLIENT_SQLITE_TIMEOUT_MS must be > 0")

    host = _get_env_str("CLIENT_SQLITE_HOST", "127.0.0.1")

    port = _get_env_int("CLIENT_SQLITE_PORT", 8000)
    if not (1 <= port <= 65535):
        raise ValueError("CLIENT_SQLITE_PORT must be between 1 and 65535")

    log_level = _get_env_str("CLIENT_SQLITE_LOG_LEVEL", "info").lower()

    return Settings(
        db_path=db_path,
        timeout_ms=timeout_ms,
        host=host,
        port=port,
        log_level=log_level,
    )
