# tests/conftest.py
import asyncio
import importlib
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

import pytest
from fastapi.testclient import TestClient

from client_sqlite.procedures import ProcedureRegistry, register_sqlite_procedures

DEFAULT_ENV = {
    "CLIENT_SQLITE_LOG_LEVEL": "warning",
    "CLIENT_SQLITE_TIMEOUT_MS": "5000",
}


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    """
    Fresh (not yet created) database file per test.
    """
    return tmp_path / "logs" / "cli.db"


@pytest.fixture()
def registry(db_path: Path) -> ProcedureRegistry:
    reg = ProcedureRegistry()
    register_sqlite_procedures(reg, default_db_path=db_path)
    return reg


@pytest.fixture()
def call(registry: ProcedureRegistry) -> Callable[..., Any]:
    """
    Synchronous wrapper around registry.call for tests.

    Usage:
      out = call("logs.store", {"level": "info", "message": "m"})
    """

    def _call(path: str, payload: Optional[dict] = None):
        return asyncio.run(registry.call(path, payload or {}))

    return _call


@pytest.fixture()
def insert_at(call) -> Callable[..., None]:
    """
    Inserts a log row with an explicit timestamp (logs.store always uses
    the column default, which only has one-second resolution).
    """
    call("logs.query", {})  # creates the table

    def _insert(timestamp: str, level: str = "info", message: str = "m", **cols: Optional[str]) -> None:
        names = ["timestamp", "level", "message", *cols.keys()]
        placeholders = ", ".join("?" for _ in names)
        call(
            "db.execute",
            {
                "sql": f"INSERT INTO logs ({', '.join(names)}) VALUES ({placeholders})",
                "params": [timestamp, level, message, *cols.values()],
            },
        )

    return _insert


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """
    HTTP client against a fresh app whose default database lives in tmp_path.
    """
    monkeypatch.setenv("CLIENT_SQLITE_DB_PATH", str(tmp_path / "api" / "cli.db"))
    for k, v in DEFAULT_ENV.items():
        monkeypatch.setenv(k, v)

    # Reload so app.state from an earlier test is not reused
    app_mod = importlib.import_module("client_sqlite.api.app")
    importlib.reload(app_mod)

    with TestClient(app_mod.app) as c:
        yield c
