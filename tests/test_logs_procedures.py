# tests/test_logs_procedures.py
import asyncio
import sqlite3
from pathlib import Path

import pytest

from client_sqlite.config import LOG_LEVELS
from client_sqlite.domain.errors import InvalidLogLevelError
from client_sqlite.procedures import ProcedureRegistry


def _count(call) -> int:
    return call("db.query", {"sql": "SELECT COUNT(*) AS n FROM logs"}).rows[0]["n"]


@pytest.mark.parametrize("level", LOG_LEVELS)
def test_store_then_query_every_level(call, level: str):
    out = call("logs.store", {"level": level, "message": f"msg-{level}"})
    assert out.id >= 1

    logs = call("logs.query", {}).logs
    assert any(e.level == level and e.message == f"msg-{level}" for e in logs)


def test_store_on_fresh_database_creates_table(call, db_path: Path):
    assert not db_path.exists()

    out = call("logs.store", {"level": "info", "message": "first"})
    assert out.id == 1
    assert db_path.exists()

    entry = call("logs.query", {}).logs[0]
    assert entry.id == 1
    assert entry.timestamp
    assert entry.created_at


def test_invalid_level_is_rejected_without_touching_storage(call, db_path: Path):
    with pytest.raises(InvalidLogLevelError):
        call("logs.store", {"level": "bogus", "message": "m"})
    assert not db_path.exists()


def test_invalid_level_does_not_write(call):
    call("logs.store", {"level": "info", "message": "kept"})
    before = _count(call)

    with pytest.raises(InvalidLogLevelError) as exc:
        call("logs.store", {"level": "bogus", "message": "m"})
    assert exc.value.code == "INVALID_LOG_LEVEL"

    assert _count(call) == before


def test_data_round_trip(call):
    call("logs.store", {"level": "info", "message": "with", "data": {"a": 1, "b": "x"}})
    call("logs.store", {"level": "info", "message": "without"})
    call("logs.store", {"level": "info", "message": "empty", "data": {}})

    by_message = {e.message: e for e in call("logs.query", {}).logs}
    assert by_message["with"].data == {"a": 1, "b": "x"}
    assert by_message["without"].data is None
    assert by_message["empty"].data == {}

    raw = call("db.query", {"sql": "SELECT message, data FROM logs ORDER BY id"}).rows
    assert [r["data"] for r in raw] == ['{"a":1,"b":"x"}', None, "{}"]


def test_optional_fields_are_stored(call):
    call(
        "logs.store",
        {
            "level": "error",
            "message": "boom",
            "sessionId": "s-1",
            "command": "build",
            "context": "pkg-a",
            "errorStack": "Traceback...",
        },
    )
    entry = call("logs.query", {}).logs[0]
    assert entry.session_id == "s-1"
    assert entry.command == "build"
    assert entry.context == "pkg-a"
    assert entry.error_stack == "Traceback..."

    dumped = entry.model_dump(by_alias=True)
    assert dumped["sessionId"] == "s-1"
    assert dumped["errorStack"] == "Traceback..."
    assert "createdAt" in dumped


def test_query_level_filter(call, insert_at):
    insert_at("2024-01-01 00:00:01", "error", "e1")
    insert_at("2024-01-01 00:00:02", "info", "i1")
    insert_at("2024-01-01 00:00:03", "warn", "w1")
    insert_at("2024-01-01 00:00:04", "debug", "d1")
    insert_at("2024-01-01 00:00:05", "error", "e2")

    logs = call("logs.query", {"level": ["warn", "error"]}).logs
    assert {e.message for e in logs} == {"e1", "w1", "e2"}
    assert all(e.level in ("warn", "error") for e in logs)

    single = call("logs.query", {"level": "debug"}).logs
    assert [e.message for e in single] == ["d1"]


def test_query_session_and_command_filters(call, insert_at):
    insert_at("2024-01-01 00:00:01", "info", "a", session_id="s1", command="build")
    insert_at("2024-01-01 00:00:02", "info", "b", session_id="s1", command="test")
    insert_at("2024-01-01 00:00:03", "info", "c", session_id="s2", command="build")

    assert [e.message for e in call("logs.query", {"sessionId": "s1"}).logs] == ["b", "a"]
    assert [e.message for e in call("logs.query", {"command": "build"}).logs] == ["c", "a"]
    assert [e.message for e in call("logs.query", {"sessionId": "s1", "command": "build"}).logs] == ["a"]


def test_query_order(call, insert_at):
    insert_at("2024-01-01 00:00:03", "info", "third")
    insert_at("2024-01-01 00:00:01", "info", "first")
    insert_at("2024-01-01 00:00:02", "info", "second")

    asc = [e.timestamp for e in call("logs.query", {"orderBy": "asc"}).logs]
    assert asc == sorted(asc)

    default = [e.timestamp for e in call("logs.query", {}).logs]
    assert default == sorted(default, reverse=True)

    desc = [e.message for e in call("logs.query", {"orderBy": "desc"}).logs]
    assert desc == ["third", "second", "first"]


def test_query_limit_and_offset(call, insert_at):
    for i in range(1, 6):
        insert_at(f"2024-01-01 00:00:0{i}", "info", f"m{i}")

    page = call("logs.query", {"limit": 2, "offset": 1}).logs
    # newest first: m5, m4, m3, ... -> ranks 2 and 3
    assert [e.message for e in page] == ["m4", "m3"]

    assert [e.message for e in call("logs.query", {"limit": 2}).logs] == ["m5", "m4"]
    assert [e.message for e in call("logs.query", {"offset": 3}).logs] == ["m2", "m1"]
    assert call("logs.query", {"limit": 0}).logs == []


def test_execute_delete_reports_changes(call):
    for level in ("debug", "info", "debug", "warn", "debug"):
        call("logs.store", {"level": level, "message": "m"})

    out = call("db.execute", {"sql": "DELETE FROM logs WHERE level = ?", "params": ["debug"]})
    assert out.changes == 3
    assert {e.level for e in call("logs.query", {}).logs} == {"info", "warn"}


def test_concurrent_stores_return_their_own_ids(registry: ProcedureRegistry, call):
    call("logs.store", {"level": "info", "message": "warmup"})

    async def _store_all():
        return await asyncio.gather(
            *(registry.call("logs.store", {"level": "info", "message": f"c{i}"}) for i in range(10))
        )

    outs = asyncio.run(_store_all())
    ids = [o.id for o in outs]
    assert len(set(ids)) == 10

    by_id = {e.id: e.message for e in call("logs.query", {}).logs}
    for i, log_id in enumerate(ids):
        assert by_id[log_id] == f"c{i}"


def test_store_respects_db_path_override(call, db_path: Path, tmp_path: Path):
    other = tmp_path / "other.db"
    call("logs.store", {"level": "info", "message": "elsewhere", "dbPath": str(other)})

    assert other.exists()
    assert not db_path.exists()
    assert [e.message for e in call("logs.query", {"dbPath": str(other)}).logs] == ["elsewhere"]


def test_check_constraint_rejects_direct_bad_level(call):
    call("logs.query", {})
    with pytest.raises(sqlite3.IntegrityError):
        call("db.execute", {"sql": "INSERT INTO logs (level, message) VALUES ('fatal', 'm')"})


def test_store_recreates_dropped_table(call):
    call("logs.store", {"level": "info", "message": "a"})
    call("db.execute", {"sql": "DROP TABLE logs"})

    out = call("logs.store", {"level": "info", "message": "b"})
    assert out.id >= 1
    assert [e.message for e in call("logs.query", {}).logs] == ["b"]


def test_query_recreates_dropped_table(call):
    call("logs.store", {"level": "info", "message": "a"})
    call("db.execute", {"sql": "DROP TABLE logs"})

    assert call("logs.query", {}).logs == []


def test_externally_written_data_is_read_back(call):
    for message in ("blank", "array", "scalar"):
        call("logs.store", {"level": "info", "message": message, "data": {"k": 1}})
    call("db.execute", {"sql": "UPDATE logs SET data = '' WHERE message = 'blank'"})
    call("db.execute", {"sql": "UPDATE logs SET data = '[1,2]' WHERE message = 'array'"})
    call("db.execute", {"sql": "UPDATE logs SET data = '7' WHERE message = 'scalar'"})

    by_message = {e.message: e.data for e in call("logs.query", {}).logs}
    assert by_message == {"blank": None, "array": [1, 2], "scalar": 7}
