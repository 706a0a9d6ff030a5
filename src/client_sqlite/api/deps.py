# src/client_sqlite/api/deps.py
from __future__ import annotations

from fastapi import Request

from client_sqlite.procedures import ProcedureRegistry


def get_registry(request: Request) -> ProcedureRegistry:
    """
    Per-request access to the procedure registry built during startup.
    """
    return request.app.state.registry  # type: ignore[attr-defined]
