# src/client_sqlite/storage/query.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from client_sqlite.domain.levels import SortOrder

LOG_COLUMNS: tuple[str, ...] = (
    "id",
    "timestamp",
    "level",
    "message",
    "data",
    "session_id",
    "command",
    "context",
    "error_stack",
    "created_at",
)


@dataclass(frozen=True)
class Predicate:
    """
    One optional filter on the logs table.

    An equality predicate binds exactly one value; a membership predicate
    binds one placeholder per value, in the order given (duplicates kept).
    """
    column: str
    values: tuple[Any, ...]
    membership: bool = False

    def clause(self) -> str:
        if not self.membership:
            return f"{self.column} = ?"
        placeholders = ", ".join("?" for _ in self.values)
        return f"{self.column} IN ({placeholders})"


@dataclass(frozen=True)
class LogQuery:
    """
    SELECT over logs built from an ordered list of predicates.

    Clause order and bind-value order both follow `predicates`, then
    LIMIT, then OFFSET.
    """
    predicates: tuple[Predicate, ...] = field(default_factory=tuple)
    order: SortOrder = SortOrder.DESC
    limit: Optional[int] = None
    offset: Optional[int] = None

    def to_sql(self) -> tuple[str, list[Any]]:
        parts = [f"SELECT {', '.join(LOG_COLUMNS)} FROM logs"]
        params: list[Any] = []

        if self.predicates:
            parts.append("WHERE " + " AND ".join(p.clause() for p in self.predicates))
            for p in self.predicates:
                params.extend(p.values)

        direction = "ASC" if self.order == SortOrder.ASC else "DESC"
        parts.append(f"ORDER BY timestamp {direction}, id {direction}")

        if self.limit is not None:
            parts.append("LIMIT ?")
            params.append(self.limit)
        elif self.offset is not None:
            # SQLite only accepts OFFSET after a LIMIT; -1 means unbounded.
            parts.append("LIMIT -1")

        if self.offset is not None:
            parts.append("OFFSET ?")
            params.append(self.offset)

        return " ".join(parts), params


def build_log_query(
    *,
    session_id: Optional[str] = None,
    command: Optional[str] = None,
    levels: Optional[Sequence[str]] = None,
    order: Any = SortOrder.DESC,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> LogQuery:
    """
    Filters are applied in a fixed order: session_id, command, level.
    Anything other than "asc" sorts newest first.
    """
    predicates: list[Predicate] = []
    if session_id is not None:
        predicates.append(Predicate("session_id", (session_id,)))
    if command is not None:
        predicates.append(Predicate("command", (command,)))
    if levels is not None:
        if isinstance(levels, str):
            levels = [levels]
        predicates.append(Predicate("level", tuple(str(lv) for lv in levels), membership=True))

    return LogQuery(
        predicates=tuple(predicates),
        order=SortOrder.ASC if order == SortOrder.ASC else SortOrder.DESC,
        limit=limit,
        offset=offset,
    )
